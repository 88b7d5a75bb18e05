"""
org_services.api.routers.departments

Department CRUD endpoints (`/api/v1/departments`).

Responsibilities:
- Paged listing with optional name/code filters.
- Lookup by id and by code; create, replace, partial update, delete.
- Point callers at the employee service for a department's members.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from org_services.api.deps import department_service_dep, pageable_dep
from org_services.db.paging import Pageable
from org_services.schemas.common import Page
from org_services.schemas.departments import (
    DepartmentEmployeesHint,
    DepartmentIn,
    DepartmentOut,
    DepartmentPatch,
)
from org_services.services.departments import DepartmentService

router = APIRouter(prefix="/api/v1/departments", tags=["departments"])


@router.get("", response_model=Page[DepartmentOut])
async def list_departments(
    name: str | None = Query(default=None),
    code: str | None = Query(default=None),
    pageable: Pageable = Depends(pageable_dep),
    svc: DepartmentService = Depends(department_service_dep),
) -> Page[DepartmentOut]:
    result = await svc.find(name=name, code=code, pageable=pageable)
    return Page[DepartmentOut].of(result)


@router.get("/by-code/{code}", response_model=DepartmentOut)
async def get_department_by_code(
    code: str,
    svc: DepartmentService = Depends(department_service_dep),
) -> DepartmentOut:
    return await svc.get_by_code(code)


@router.get("/{department_id}", response_model=DepartmentOut)
async def get_department(
    department_id: int,
    svc: DepartmentService = Depends(department_service_dep),
) -> DepartmentOut:
    return await svc.get(department_id)


@router.post("", response_model=DepartmentOut, status_code=HTTP_201_CREATED)
async def create_department(
    body: DepartmentIn,
    svc: DepartmentService = Depends(department_service_dep),
) -> DepartmentOut:
    return await svc.create(body)


@router.put("/{department_id}", response_model=DepartmentOut)
async def replace_department(
    department_id: int,
    body: DepartmentIn,
    svc: DepartmentService = Depends(department_service_dep),
) -> DepartmentOut:
    return await svc.replace(department_id, body)


@router.patch("/{department_id}", response_model=DepartmentOut)
async def patch_department(
    department_id: int,
    body: DepartmentPatch,
    svc: DepartmentService = Depends(department_service_dep),
) -> DepartmentOut:
    return await svc.patch(department_id, body)


@router.delete("/{department_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_department(
    department_id: int,
    svc: DepartmentService = Depends(department_service_dep),
) -> Response:
    await svc.delete(department_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/{department_id}/employees", response_model=DepartmentEmployeesHint)
async def department_employees(
    department_id: int,
    svc: DepartmentService = Depends(department_service_dep),
) -> DepartmentEmployeesHint:
    # Employees are owned by the employee service; answer with where to find them.
    return await svc.employees_hint(department_id)
