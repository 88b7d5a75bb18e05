"""
org_services.services.employees

Employee lifecycle service (transaction owner).

Responsibilities:
- CRUD over employees with the unique-email rule.
- Idempotent creation keyed by the client's `Idempotency-Key`.
- Optional enrichment of responses with the employee's department.
- Publish lifecycle events after each committed change.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from org_services.clients.departments import DepartmentClient
from org_services.db.models import Employee
from org_services.db.paging import Pageable, PageResult
from org_services.db.repositories.employees import EmployeeRepo
from org_services.errors import DuplicateEmail, EmployeeNotFound
from org_services.events.publisher import EventPublisher, epoch_millis
from org_services.observability.logging import get_logger
from org_services.schemas.employees import (
    EmployeeIn,
    EmployeeOut,
    EmployeePatch,
    EmployeeStats,
)
from org_services.services.idempotency import IdempotencyStore

log = get_logger(__name__)


class EmployeeService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        departments: DepartmentClient,
        publisher: EventPublisher,
        idempotency: IdempotencyStore,
    ) -> None:
        self._session = session
        self._departments = departments
        self._publisher = publisher
        self._idempotency = idempotency
        self._employees = EmployeeRepo(session)

    async def find(
        self,
        *,
        email: str | None,
        last_name: str | None,
        department_id: int | None,
        pageable: Pageable,
    ) -> PageResult[EmployeeOut]:
        page = await self._employees.find(
            email=email, last_name=last_name, department_id=department_id, pageable=pageable
        )
        return page.map(EmployeeOut.model_validate)

    async def get(self, employee_id: int, *, include_department: bool = False) -> EmployeeOut:
        return await self._to_out(await self._require(employee_id), enrich=include_department)

    async def create(self, body: EmployeeIn, *, idempotency_key: str | None = None) -> EmployeeOut:
        async with self._idempotency.claim(idempotency_key):
            replay = await self._idempotency.get(idempotency_key)
            if replay is not None:
                log.info("idempotent_replay", employee_id=replay.id)
                return replay
            return await self._create(body, idempotency_key)

    async def _create(self, body: EmployeeIn, idempotency_key: str | None) -> EmployeeOut:
        if await self._employees.exists_by_email(body.email):
            raise DuplicateEmail("Email already exists")
        emp = await self._employees.add(
            Employee(
                first_name=body.first_name,
                last_name=body.last_name,
                email=body.email,
                department_id=body.department_id,
            )
        )
        await self._session.commit()
        log.info("employee_created", employee_id=emp.id, department_id=emp.department_id)

        result = await self._to_out(emp, enrich=True)
        await self._idempotency.put(idempotency_key, result)
        await self._publish("EMPLOYEE_CREATED", emp)
        return result

    async def replace(self, employee_id: int, body: EmployeeIn) -> EmployeeOut:
        emp = await self._require(employee_id)
        old_department_id = emp.department_id
        await self._check_email_change(emp, body.email)
        emp.first_name = body.first_name
        emp.last_name = body.last_name
        emp.email = body.email
        emp.department_id = body.department_id
        return await self._commit_update(emp, old_department_id)

    async def patch(self, employee_id: int, body: EmployeePatch) -> EmployeeOut:
        emp = await self._require(employee_id)
        old_department_id = emp.department_id
        if body.first_name is not None:
            emp.first_name = body.first_name
        if body.last_name is not None:
            emp.last_name = body.last_name
        if body.email is not None:
            await self._check_email_change(emp, body.email)
            emp.email = body.email
        if body.department_id is not None:
            emp.department_id = body.department_id
        return await self._commit_update(emp, old_department_id)

    async def delete(self, employee_id: int) -> None:
        emp = await self._require(employee_id)
        await self._employees.delete(emp)
        await self._session.commit()
        log.info("employee_deleted", employee_id=employee_id)
        await self._publish("EMPLOYEE_DELETED", emp)

    async def search(self, query: str, *, pageable: Pageable) -> PageResult[EmployeeOut]:
        page = await self._employees.search(query, pageable=pageable)
        return page.map(EmployeeOut.model_validate)

    async def stats(self) -> EmployeeStats:
        return EmployeeStats(
            total_employees=await self._employees.count(),
            employees_by_department=await self._employees.count_by_department(),
            employees_without_department=await self._employees.count_without_department(),
        )

    async def _require(self, employee_id: int) -> Employee:
        emp = await self._employees.get(employee_id)
        if emp is None:
            raise EmployeeNotFound("Employee not found")
        return emp

    async def _check_email_change(self, emp: Employee, new_email: str) -> None:
        if emp.email != new_email and await self._employees.exists_by_email(new_email):
            raise DuplicateEmail("Email already exists")

    async def _commit_update(self, emp: Employee, old_department_id: int | None) -> EmployeeOut:
        await self._session.flush()
        await self._session.commit()
        if old_department_id is not None and old_department_id != emp.department_id:
            log.info(
                "employee_moved",
                employee_id=emp.id,
                from_department=old_department_id,
                to_department=emp.department_id,
            )
        await self._publish("EMPLOYEE_UPDATED", emp, old_department_id=old_department_id)
        # Updates always answer with the department attached.
        return await self._to_out(emp, enrich=True)

    async def _to_out(self, emp: Employee, *, enrich: bool) -> EmployeeOut:
        out = EmployeeOut.model_validate(emp)
        if enrich and emp.department_id is not None:
            out.department = await self._departments.get_department(emp.department_id)
        return out

    async def _publish(
        self, event_type: str, emp: Employee, *, old_department_id: int | None = None
    ) -> None:
        payload: dict[str, Any] = {
            "eventType": event_type,
            "employeeId": emp.id,
            "email": emp.email,
            "firstName": emp.first_name,
            "lastName": emp.last_name,
            "departmentId": emp.department_id,
            "timestamp": epoch_millis(),
        }
        if event_type == "EMPLOYEE_UPDATED":
            payload["oldDepartmentId"] = old_department_id
            payload["newDepartmentId"] = emp.department_id
        await self._publisher.send_employee_event(event_type, payload)


# --- Module Notes -----------------------------------------------------------
# The department client never raises (it falls back to a placeholder snapshot), so
# enrichment cannot turn a successful write into an error response.
