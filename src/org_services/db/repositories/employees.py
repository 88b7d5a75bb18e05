"""
org_services.db.repositories.employees

Repository for `Employee` entities.

Responsibilities:
- Filtered and free-text paged queries.
- Uniqueness probe on email.
- Aggregate counts for the statistics endpoint.
"""

from __future__ import annotations

from sqlalchemy import exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from org_services.db.models import Employee
from org_services.db.paging import Pageable, PageResult, paginate

# Keys are the public (camelCase) property names clients sort by.
_SORTABLE = {
    "id": Employee.id,
    "firstName": Employee.first_name,
    "lastName": Employee.last_name,
    "email": Employee.email,
    "departmentId": Employee.department_id,
}


class EmployeeRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, employee_id: int) -> Employee | None:
        return await self._session.get(Employee, employee_id)

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(exists().where(Employee.email == email))
        return bool((await self._session.execute(stmt)).scalar())

    async def find(
        self,
        *,
        email: str | None = None,
        last_name: str | None = None,
        department_id: int | None = None,
        pageable: Pageable,
    ) -> PageResult[Employee]:
        stmt = select(Employee)
        if email is not None:
            stmt = stmt.where(Employee.email == email)
        if last_name is not None:
            stmt = stmt.where(func.lower(Employee.last_name).contains(last_name.lower()))
        if department_id is not None:
            stmt = stmt.where(Employee.department_id == department_id)
        return await paginate(self._session, stmt, pageable, sortable=_SORTABLE)

    async def search(self, query: str, *, pageable: Pageable) -> PageResult[Employee]:
        needle = query.lower()
        stmt = select(Employee).where(
            or_(
                func.lower(Employee.first_name).contains(needle),
                func.lower(Employee.last_name).contains(needle),
                func.lower(Employee.email).contains(needle),
            )
        )
        return await paginate(self._session, stmt, pageable, sortable=_SORTABLE)

    async def count(self) -> int:
        stmt = select(func.count()).select_from(Employee)
        return int((await self._session.execute(stmt)).scalar_one())

    async def count_by_department(self) -> dict[int, int]:
        stmt = (
            select(Employee.department_id, func.count())
            .where(Employee.department_id.is_not(None))
            .group_by(Employee.department_id)
        )
        rows = await self._session.execute(stmt)
        return {int(dept_id): int(n) for dept_id, n in rows.all()}

    async def count_without_department(self) -> int:
        stmt = select(func.count()).select_from(Employee).where(Employee.department_id.is_(None))
        return int((await self._session.execute(stmt)).scalar_one())

    async def add(self, employee: Employee) -> Employee:
        self._session.add(employee)
        await self._session.flush()
        return employee

    async def delete(self, employee: Employee) -> None:
        await self._session.delete(employee)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# `contains()` escapes nothing by default; `%`/`_` in user input act as wildcards,
# which matches the behaviour clients already rely on for search.
