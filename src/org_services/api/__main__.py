"""
org_services.api.__main__

Entrypoint for running a service via `python -m org_services.api` (or `org-services`).

Responsibilities:
- Load settings (`ORG_SERVICE` selects department/employee/product/config).
- Create the app for that service.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from org_services.api.app import create_app
from org_services.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
