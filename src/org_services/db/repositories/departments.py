from __future__ import annotations

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from org_services.db.models import Department
from org_services.db.paging import Pageable, PageResult, paginate

_SORTABLE = {
    "id": Department.id,
    "name": Department.name,
    "code": Department.code,
    "description": Department.description,
}


class DepartmentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, department_id: int) -> Department | None:
        return await self._session.get(Department, department_id)

    async def find_by_code(self, code: str) -> Department | None:
        stmt = select(Department).where(Department.code == code)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def exists_by_code(self, code: str) -> bool:
        stmt = select(exists().where(Department.code == code))
        return bool((await self._session.execute(stmt)).scalar())

    async def search(
        self,
        *,
        name: str | None = None,
        code: str | None = None,
        pageable: Pageable,
    ) -> PageResult[Department]:
        # Filters are case-insensitive "contains" matches, AND-combined.
        stmt = select(Department)
        if name is not None:
            stmt = stmt.where(func.lower(Department.name).contains(name.lower()))
        if code is not None:
            stmt = stmt.where(func.lower(Department.code).contains(code.lower()))
        return await paginate(self._session, stmt, pageable, sortable=_SORTABLE)

    async def add(self, department: Department) -> Department:
        self._session.add(department)
        await self._session.flush()
        return department

    async def delete(self, department: Department) -> None:
        await self._session.delete(department)
        await self._session.flush()
