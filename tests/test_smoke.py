"""
tests.test_smoke

Minimal smoke tests to validate every service can boot and serve core endpoints.

Responsibilities:
- Ensure each app factory starts, and health/readiness probes work in test mode.
"""

from __future__ import annotations

import pytest

from org_services.api.app import create_app


@pytest.mark.asyncio
@pytest.mark.parametrize("service", ["department", "employee", "product", "config"])
async def test_health_endpoints(make_settings, serve_app, service: str) -> None:
    app = create_app(settings=make_settings(service=service))

    async with serve_app(app) as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"

        r = await client.get("/actuator/health")
        assert r.status_code == 200
        assert r.json() == {"status": "UP"}


@pytest.mark.asyncio
async def test_trace_id_is_echoed_or_generated(make_settings, serve_app) -> None:
    app = create_app(settings=make_settings(service="department"))

    async with serve_app(app) as client:
        r = await client.get("/healthz", headers={"X-Trace-Id": "trace-123"})
        assert r.headers["X-Trace-Id"] == "trace-123"

        r = await client.get("/healthz")
        assert len(r.headers["X-Trace-Id"]) == 36


@pytest.mark.asyncio
async def test_unknown_route_is_problem_detail(make_settings, serve_app) -> None:
    app = create_app(settings=make_settings(service="product"))

    async with serve_app(app) as client:
        r = await client.get("/nope")
        assert r.status_code == 404
        assert r.headers["content-type"].startswith("application/problem+json")
        body = r.json()
        assert body["title"] == "Not Found"
        assert body["instance"] == "/nope"
