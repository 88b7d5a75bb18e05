"""
org_services.services.config_repo

File-backed configuration repository for the config server.

Responsibilities:
- Resolve the YAML files that apply to an application/profile pair.
- Flatten nested YAML into dotted property keys.
- Build the environment document clients already consume
  (`name`, `profiles`, `label`, `version`, `state`, `propertySources`).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from org_services.errors import BadRequestError
from org_services.observability.logging import get_logger

log = get_logger(__name__)

_YAML_SUFFIXES = (".yml", ".yaml")


def flatten(data: Any, prefix: str = "") -> dict[str, Any]:
    out: dict[str, Any] = {}
    if isinstance(data, dict):
        for key, value in data.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            out.update(flatten(value, name))
    elif isinstance(data, list):
        for i, value in enumerate(data):
            out.update(flatten(value, f"{prefix}[{i}]"))
    elif prefix:
        out[prefix] = data
    return out


def _check_segment(value: str) -> str:
    if not value or "/" in value or "\\" in value or ".." in value:
        raise BadRequestError(f"Invalid path segment '{value}'")
    return value


class ConfigRepository:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _find(self, stem: str) -> Path | None:
        for suffix in _YAML_SUFFIXES:
            path = self._root / f"{stem}{suffix}"
            if path.is_file():
                return path
        return None

    def _candidates(self, application: str, profiles: list[str]) -> list[str]:
        # Most specific first: later profiles override earlier ones.
        stems: list[str] = []
        for profile in reversed(profiles):
            stems.append(f"{application}-{profile}")
            if application != "application":
                stems.append(f"application-{profile}")
        stems.append(application)
        if application != "application":
            stems.append("application")
        return stems

    def environment(
        self, application: str, profile: str, label: str | None = None
    ) -> dict[str, Any]:
        _check_segment(application)
        profiles = [_check_segment(p.strip()) for p in profile.split(",") if p.strip()]
        if label is not None:
            _check_segment(label)

        sources: list[dict[str, Any]] = []
        for stem in self._candidates(application, profiles):
            path = self._find(stem)
            if path is None:
                continue
            with path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
            sources.append({"name": f"file:{path.as_posix()}", "source": flatten(data)})

        log.info(
            "config_resolved",
            application=application,
            profiles=profiles,
            sources=[s["name"] for s in sources],
        )
        return {
            "name": application,
            "profiles": profiles,
            "label": label,
            "version": None,
            "state": None,
            "propertySources": sources,
        }
