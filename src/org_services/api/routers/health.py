"""
org_services.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation where a DB exists.
- Provide the actuator-style `/actuator/health` document existing monitors poll.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from sqlalchemy import text

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> dict[str, str]:
    # Product and config services have no database; they are ready once serving.
    session_factory = getattr(request.app.state, "sessionmaker", None)
    if session_factory is not None:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get("/actuator/health")
async def actuator_health() -> dict[str, str]:
    return {"status": "UP"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
