"""
org_services.api.routers.config

Config server endpoints.

Responsibilities:
- Serve the environment document for `/{application}/{profile}[/{label}]`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from org_services.api.deps import config_repository_dep
from org_services.services.config_repo import ConfigRepository

router = APIRouter(tags=["config"])


@router.get("/{application}/{profile}")
async def environment(
    application: str,
    profile: str,
    repo: ConfigRepository = Depends(config_repository_dep),
) -> dict[str, Any]:
    return repo.environment(application, profile)


@router.get("/{application}/{profile}/{label}")
async def environment_with_label(
    application: str,
    profile: str,
    label: str,
    repo: ConfigRepository = Depends(config_repository_dep),
) -> dict[str, Any]:
    return repo.environment(application, profile, label)
