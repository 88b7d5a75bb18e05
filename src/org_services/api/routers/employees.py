"""
org_services.api.routers.employees

Employee endpoints.

Responsibilities:
- `/api/v1/employees`: CRUD, filtering, free-text search and statistics.
- `/api/v2/employees`: the same contract with pass-through caching of single
  employees and statistics; every write evicts both caches.
- Forward the `Idempotency-Key` header to creation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from org_services.api.deps import cache_dep, employee_service_dep, pageable_dep
from org_services.cache import Cache
from org_services.db.paging import Pageable
from org_services.schemas.common import Page
from org_services.schemas.employees import EmployeeIn, EmployeeOut, EmployeePatch, EmployeeStats
from org_services.services.employees import EmployeeService

router = APIRouter(prefix="/api/v1/employees", tags=["employees"])
router_v2 = APIRouter(prefix="/api/v2/employees", tags=["employees-v2"])

EMPLOYEES_CACHE = "employees"
STATS_CACHE = "employeeStats"


def _dump(model: EmployeeOut | EmployeeStats) -> dict:
    return model.model_dump(mode="json", by_alias=True)


async def _evict(cache: Cache) -> None:
    await cache.evict_all(EMPLOYEES_CACHE, STATS_CACHE)


# --- v1 ---------------------------------------------------------------------


@router.get("", response_model=Page[EmployeeOut])
async def list_employees(
    email: str | None = Query(default=None),
    last_name: str | None = Query(default=None, alias="lastName"),
    department_id: int | None = Query(default=None, alias="departmentId"),
    pageable: Pageable = Depends(pageable_dep),
    svc: EmployeeService = Depends(employee_service_dep),
) -> Page[EmployeeOut]:
    result = await svc.find(
        email=email, last_name=last_name, department_id=department_id, pageable=pageable
    )
    return Page[EmployeeOut].of(result)


@router.get("/search", response_model=Page[EmployeeOut])
async def search_employees(
    query: str = Query(...),
    pageable: Pageable = Depends(pageable_dep),
    svc: EmployeeService = Depends(employee_service_dep),
) -> Page[EmployeeOut]:
    return Page[EmployeeOut].of(await svc.search(query, pageable=pageable))


@router.get("/stats", response_model=EmployeeStats)
async def employee_stats(svc: EmployeeService = Depends(employee_service_dep)) -> EmployeeStats:
    return await svc.stats()


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee(
    employee_id: int,
    include_department: bool = Query(default=False, alias="includeDepartment"),
    svc: EmployeeService = Depends(employee_service_dep),
) -> EmployeeOut:
    return await svc.get(employee_id, include_department=include_department)


@router.post("", response_model=EmployeeOut, status_code=HTTP_201_CREATED)
async def create_employee(
    body: EmployeeIn,
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    svc: EmployeeService = Depends(employee_service_dep),
) -> EmployeeOut:
    return await svc.create(body, idempotency_key=idempotency_key)


@router.put("/{employee_id}", response_model=EmployeeOut)
async def replace_employee(
    employee_id: int,
    body: EmployeeIn,
    svc: EmployeeService = Depends(employee_service_dep),
) -> EmployeeOut:
    return await svc.replace(employee_id, body)


@router.patch("/{employee_id}", response_model=EmployeeOut)
async def patch_employee(
    employee_id: int,
    body: EmployeePatch,
    svc: EmployeeService = Depends(employee_service_dep),
) -> EmployeeOut:
    return await svc.patch(employee_id, body)


@router.delete("/{employee_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    svc: EmployeeService = Depends(employee_service_dep),
) -> Response:
    await svc.delete(employee_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- v2 (cached) ------------------------------------------------------------


@router_v2.get("", response_model=Page[EmployeeOut])
async def list_employees_v2(
    email: str | None = Query(default=None),
    last_name: str | None = Query(default=None, alias="lastName"),
    department_id: int | None = Query(default=None, alias="departmentId"),
    pageable: Pageable = Depends(pageable_dep),
    svc: EmployeeService = Depends(employee_service_dep),
) -> Page[EmployeeOut]:
    result = await svc.find(
        email=email, last_name=last_name, department_id=department_id, pageable=pageable
    )
    return Page[EmployeeOut].of(result)


@router_v2.get("/search", response_model=Page[EmployeeOut])
async def search_employees_v2(
    query: str = Query(...),
    pageable: Pageable = Depends(pageable_dep),
    svc: EmployeeService = Depends(employee_service_dep),
) -> Page[EmployeeOut]:
    return Page[EmployeeOut].of(await svc.search(query, pageable=pageable))


@router_v2.get("/stats", response_model=EmployeeStats)
async def employee_stats_v2(
    svc: EmployeeService = Depends(employee_service_dep),
    cache: Cache = Depends(cache_dep),
) -> dict:
    async def load() -> dict:
        return _dump(await svc.stats())

    return await cache.get_or_load(STATS_CACHE, "all", load)


@router_v2.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee_v2(
    employee_id: int,
    include_department: bool = Query(default=False, alias="includeDepartment"),
    svc: EmployeeService = Depends(employee_service_dep),
    cache: Cache = Depends(cache_dep),
) -> dict:
    async def load() -> dict:
        return _dump(await svc.get(employee_id, include_department=include_department))

    key = f"{employee_id}:{str(include_department).lower()}"
    return await cache.get_or_load(EMPLOYEES_CACHE, key, load)


@router_v2.post("", response_model=EmployeeOut, status_code=HTTP_201_CREATED)
async def create_employee_v2(
    body: EmployeeIn,
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
    svc: EmployeeService = Depends(employee_service_dep),
    cache: Cache = Depends(cache_dep),
) -> EmployeeOut:
    out = await svc.create(body, idempotency_key=idempotency_key)
    await _evict(cache)
    return out


@router_v2.put("/{employee_id}", response_model=EmployeeOut)
async def replace_employee_v2(
    employee_id: int,
    body: EmployeeIn,
    svc: EmployeeService = Depends(employee_service_dep),
    cache: Cache = Depends(cache_dep),
) -> EmployeeOut:
    out = await svc.replace(employee_id, body)
    await _evict(cache)
    return out


@router_v2.patch("/{employee_id}", response_model=EmployeeOut)
async def patch_employee_v2(
    employee_id: int,
    body: EmployeePatch,
    svc: EmployeeService = Depends(employee_service_dep),
    cache: Cache = Depends(cache_dep),
) -> EmployeeOut:
    out = await svc.patch(employee_id, body)
    await _evict(cache)
    return out


@router_v2.delete("/{employee_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_employee_v2(
    employee_id: int,
    svc: EmployeeService = Depends(employee_service_dep),
    cache: Cache = Depends(cache_dep),
) -> Response:
    await svc.delete(employee_id)
    await _evict(cache)
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- Module Notes -----------------------------------------------------------
# `/search` and `/stats` are declared before `/{employee_id}` so they are not
# captured by the path parameter route.
