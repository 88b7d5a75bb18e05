"""
org_services.schemas.employees

Employee request/response DTOs.

Responsibilities:
- Validate create/replace bodies (required names, valid unique-able email).
- Describe the enriched response (optional embedded department snapshot).
- Describe the statistics payload.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, EmailStr

from org_services.schemas.common import CamelModel, max_length, not_blank

FirstName = Annotated[
    str,
    AfterValidator(not_blank("firstName is required")),
    AfterValidator(max_length(120, "firstName must not exceed 120 characters")),
]
LastName = Annotated[
    str,
    AfterValidator(not_blank("lastName is required")),
    AfterValidator(max_length(120, "lastName must not exceed 120 characters")),
]
Email = Annotated[
    EmailStr,
    AfterValidator(max_length(200, "email must not exceed 200 characters")),
]


class DepartmentDTO(CamelModel):
    """
    Department snapshot as served by the department service.
    """

    id: int
    name: str | None = None
    code: str | None = None
    description: str | None = None


class EmployeeIn(CamelModel):
    first_name: FirstName
    last_name: LastName
    email: Email
    department_id: int | None = None


class EmployeePatch(CamelModel):
    first_name: FirstName | None = None
    last_name: LastName | None = None
    email: Email | None = None
    department_id: int | None = None


class EmployeeOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    department_id: int | None = None
    department: DepartmentDTO | None = None


class EmployeeStats(CamelModel):
    total_employees: int
    employees_by_department: dict[int, int]
    employees_without_department: int
