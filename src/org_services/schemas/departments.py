from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator

from org_services.schemas.common import CamelModel, max_length, not_blank

Name = Annotated[
    str,
    AfterValidator(not_blank("name is required")),
    AfterValidator(max_length(120, "name must not exceed 120 characters")),
]
Code = Annotated[
    str,
    AfterValidator(not_blank("code is required")),
    AfterValidator(max_length(20, "code must not exceed 20 characters")),
]


class DepartmentIn(CamelModel):
    name: Name
    code: Code
    description: str | None = None


class DepartmentPatch(CamelModel):
    name: Name | None = None
    code: Code | None = None
    description: str | None = None


class DepartmentOut(CamelModel):
    id: int
    name: str
    code: str
    description: str | None = None


class DepartmentRef(CamelModel):
    id: int
    name: str
    code: str


class DepartmentEmployeesHint(CamelModel):
    department: DepartmentRef
    message: str
    suggested_endpoint: str
