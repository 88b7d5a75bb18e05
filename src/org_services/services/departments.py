"""
org_services.services.departments

Department lifecycle service (transaction owner).

Responsibilities:
- CRUD over departments with the unique-code rule.
- Publish lifecycle events and admin notifications after each committed change.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from org_services.db.models import Department
from org_services.db.paging import Pageable, PageResult
from org_services.db.repositories.departments import DepartmentRepo
from org_services.errors import DepartmentNotFound, DuplicateCode
from org_services.events.publisher import EventPublisher, epoch_millis
from org_services.observability.logging import get_logger
from org_services.schemas.departments import (
    DepartmentEmployeesHint,
    DepartmentIn,
    DepartmentOut,
    DepartmentPatch,
    DepartmentRef,
)

log = get_logger(__name__)


class DepartmentService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        publisher: EventPublisher,
        notification_recipient: str = "admin@company.com",
    ) -> None:
        self._session = session
        self._publisher = publisher
        self._recipient = notification_recipient
        self._departments = DepartmentRepo(session)

    async def find(
        self, *, name: str | None, code: str | None, pageable: Pageable
    ) -> PageResult[DepartmentOut]:
        page = await self._departments.search(name=name, code=code, pageable=pageable)
        return page.map(DepartmentOut.model_validate)

    async def get(self, department_id: int) -> DepartmentOut:
        return DepartmentOut.model_validate(await self._require(department_id))

    async def get_by_code(self, code: str) -> DepartmentOut:
        dept = await self._departments.find_by_code(code)
        if dept is None:
            raise DepartmentNotFound(f"Department with code '{code}' not found")
        return DepartmentOut.model_validate(dept)

    async def create(self, body: DepartmentIn) -> DepartmentOut:
        if await self._departments.exists_by_code(body.code):
            raise DuplicateCode(f"Department code '{body.code}' already exists")
        dept = await self._departments.add(
            Department(name=body.name, code=body.code, description=body.description)
        )
        await self._session.commit()
        log.info("department_created", department_id=dept.id, code=dept.code)

        await self._publish(
            "DEPARTMENT_CREATED", dept, f"New department created: {dept.name} ({dept.code})"
        )
        return DepartmentOut.model_validate(dept)

    async def replace(self, department_id: int, body: DepartmentIn) -> DepartmentOut:
        dept = await self._require(department_id)
        await self._check_code_change(dept, body.code)
        dept.name = body.name
        dept.code = body.code
        dept.description = body.description
        return await self._commit_update(dept)

    async def patch(self, department_id: int, body: DepartmentPatch) -> DepartmentOut:
        dept = await self._require(department_id)
        if body.name is not None:
            dept.name = body.name
        if body.code is not None:
            await self._check_code_change(dept, body.code)
            dept.code = body.code
        if body.description is not None:
            dept.description = body.description
        return await self._commit_update(dept)

    async def delete(self, department_id: int) -> None:
        dept = await self._require(department_id)
        snapshot = {"departmentId": dept.id, "name": dept.name, "code": dept.code}
        await self._departments.delete(dept)
        await self._session.commit()
        log.info("department_deleted", department_id=department_id)

        await self._publisher.send_department_event(
            "DEPARTMENT_DELETED",
            {"eventType": "DEPARTMENT_DELETED", **snapshot, "timestamp": epoch_millis()},
        )
        await self._notify(
            f"Department deleted: {snapshot['name']} ({snapshot['code']}), "
            "please reassign its employees"
        )

    async def employees_hint(self, department_id: int) -> DepartmentEmployeesHint:
        dept = await self._require(department_id)
        return DepartmentEmployeesHint(
            department=DepartmentRef.model_validate(dept),
            message="Employee list should be fetched from Employee service via API Gateway",
            suggested_endpoint=f"/api/v1/employees?departmentId={department_id}",
        )

    async def _require(self, department_id: int) -> Department:
        dept = await self._departments.get(department_id)
        if dept is None:
            raise DepartmentNotFound(f"Department with id {department_id} not found")
        return dept

    async def _check_code_change(self, dept: Department, new_code: str) -> None:
        if dept.code != new_code and await self._departments.exists_by_code(new_code):
            raise DuplicateCode(f"Department code '{new_code}' already exists")

    async def _commit_update(self, dept: Department) -> DepartmentOut:
        await self._session.flush()
        await self._session.commit()
        log.info("department_updated", department_id=dept.id, code=dept.code)
        await self._publish(
            "DEPARTMENT_UPDATED", dept, f"Department updated: {dept.name} ({dept.code})"
        )
        return DepartmentOut.model_validate(dept)

    async def _publish(self, event_type: str, dept: Department, message: str) -> None:
        payload: dict[str, Any] = {
            "eventType": event_type,
            "departmentId": dept.id,
            "name": dept.name,
            "code": dept.code,
            "description": dept.description,
            "timestamp": epoch_millis(),
        }
        await self._publisher.send_department_event(event_type, payload)
        await self._notify(message)

    async def _notify(self, message: str) -> None:
        await self._publisher.send_notification_event(
            "SYSTEM",
            {
                "eventType": "SYSTEM",
                "recipient": self._recipient,
                "message": message,
                "timestamp": epoch_millis(),
            },
        )


# --- Module Notes -----------------------------------------------------------
# Events go out only after commit, so consumers never observe a change that was
# rolled back.
