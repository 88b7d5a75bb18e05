"""
org_services.schemas

Wire DTOs shared by routers, services and HTTP clients.

Responsibilities:
- Keep the JSON contract (camelCase) separate from the ORM entities.
"""

# Package marker; schemas are imported directly from submodules.
