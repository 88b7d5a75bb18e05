"""
org_services.clients.departments

HTTP client the employee service uses to enrich responses with department data.

Responsibilities:
- Call `GET /api/v1/departments/{id}` on the department service.
- Propagate the caller's trace id.
- Degrade to a fallback department snapshot whenever the call fails.
"""

from __future__ import annotations

import httpx

from org_services.observability.logging import get_logger
from org_services.observability.middleware import TRACE_ID_HEADER, current_trace_id
from org_services.schemas.employees import DepartmentDTO

log = get_logger(__name__)


def fallback_department(department_id: int) -> DepartmentDTO:
    return DepartmentDTO(
        id=department_id,
        name="Department Service Unavailable",
        code="SERVICE_DOWN",
        description="Department service is temporarily down, please try again later",
    )


class DepartmentClient:
    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    def _headers(self) -> dict[str, str]:
        trace_id = current_trace_id()
        return {TRACE_ID_HEADER: trace_id} if trace_id else {}

    async def get_department(self, department_id: int) -> DepartmentDTO:
        try:
            r = await self._http.get(
                f"/api/v1/departments/{department_id}", headers=self._headers()
            )
            r.raise_for_status()
            return DepartmentDTO.model_validate(r.json())
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers undecodable JSON and pydantic validation failures.
            log.warning(
                "department_lookup_failed",
                department_id=department_id,
                error=type(e).__name__,
                detail=str(e),
            )
            return fallback_department(department_id)


# --- Module Notes -----------------------------------------------------------
# The base URL and timeout come from settings when the app builds the shared
# httpx.AsyncClient (see `api.app`).
