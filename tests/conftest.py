"""
tests.conftest

Shared fixtures for the service tests.

Responsibilities:
- Build per-test settings backed by a temporary SQLite database.
- Run an app inside its lifespan and expose an in-process httpx client.
- Provide fakes for the event publisher and the outbound HTTP services.
"""

from __future__ import annotations

import contextlib
import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from org_services.api.app import create_app
from org_services.api.deps import department_client_dep, fakestore_client_dep, publisher_dep
from org_services.clients.departments import DepartmentClient
from org_services.clients.fakestore import FakeStoreClient
from org_services.events.publisher import EventPublisher
from org_services.settings import Settings


class RecordingPublisher(EventPublisher):
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def publish(self, topic: str, event_type: str, payload: dict[str, Any]) -> None:
        self.events.append((topic, event_type, payload))

    def of(self, topic: str) -> list[dict[str, Any]]:
        return [payload for t, _, payload in self.events if t == topic]


@contextlib.asynccontextmanager
async def serve(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


def mock_http(handler: Callable[[httpx.Request], httpx.Response], base_url: str) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)


@pytest.fixture
def serve_app() -> Callable[[FastAPI], contextlib.AbstractAsyncContextManager[httpx.AsyncClient]]:
    return serve


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    def build(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "env": "test",
            "database_url": f"sqlite+aiosqlite:///{tmp_path / 'org.db'}",
            "config_repo_dir": str(tmp_path / "config-repo"),
            "log_level": "WARNING",
        }
        values.update(overrides)
        return Settings(**values)

    return build


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


class FakeDepartments:
    """
    Stand-in department service answering `GET /api/v1/departments/{id}`.
    """

    def __init__(self) -> None:
        self.departments: dict[int, dict[str, Any]] = {
            1: {"id": 1, "name": "Engineering", "code": "ENG", "description": "Builds things"},
            2: {"id": 2, "name": "Sales", "code": "SAL", "description": None},
        }
        self.calls: list[httpx.Request] = []
        self.down = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        department_id = int(request.url.path.rsplit("/", 1)[-1])
        dept = self.departments.get(department_id)
        if dept is None:
            return httpx.Response(404, json={"title": "Resource Not Found"})
        return httpx.Response(200, json=dept)


@pytest.fixture
def fake_departments() -> FakeDepartments:
    return FakeDepartments()


@pytest_asyncio.fixture
async def department_api(make_settings, publisher) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=make_settings(service="department"))
    app.dependency_overrides[publisher_dep] = lambda: publisher
    async with serve(app) as client:
        yield client


@pytest_asyncio.fixture
async def employee_app(make_settings, publisher, fake_departments) -> AsyncIterator[FastAPI]:
    app = create_app(settings=make_settings(service="employee"))
    http = mock_http(fake_departments, "http://departments")
    app.dependency_overrides[publisher_dep] = lambda: publisher
    app.dependency_overrides[department_client_dep] = lambda: DepartmentClient(http=http)
    yield app
    await http.aclose()


@pytest_asyncio.fixture
async def employee_api(employee_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async with serve(employee_app) as client:
        yield client


PRODUCTS = [
    {
        "id": 1,
        "title": "Fjallraven Backpack",
        "price": 109.95,
        "description": "Your perfect pack for everyday use",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/1.jpg",
        "rating": {"rate": 3.9, "count": 120},
    },
    {
        "id": 2,
        "title": "Mens Casual T-Shirt",
        "price": 22.3,
        "description": "Slim-fitting style",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/2.jpg",
        "rating": {"rate": 4.1, "count": 259},
    },
    {
        "id": 3,
        "title": "Gold Chain Bracelet",
        "price": 695.0,
        "description": "Dragon station chain",
        "category": "jewelery",
        "image": "https://fakestoreapi.com/img/3.jpg",
        "rating": {"rate": 4.6, "count": 400},
    },
]


class FakeStore:
    """
    Stand-in FakeStore API. Unknown product ids answer 200 with an empty body.
    """

    def __init__(self, products: list[dict[str, Any]] | None = None) -> None:
        self.products = [dict(p) for p in (PRODUCTS if products is None else products)]
        self.calls: list[httpx.Request] = []
        self.down = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.down:
            return httpx.Response(503, text="unavailable")
        path = request.url.path
        if path == "/products":
            limit = request.url.params.get("limit")
            items = self.products[: int(limit)] if limit else self.products
            return httpx.Response(200, json=items)
        if path == "/products/categories":
            return httpx.Response(200, json=sorted({p["category"] for p in self.products}))
        if path.startswith("/products/category/"):
            category = path.removeprefix("/products/category/")
            return httpx.Response(200, json=[p for p in self.products if p["category"] == category])
        product_id = int(path.rsplit("/", 1)[-1])
        for p in self.products:
            if p["id"] == product_id:
                return httpx.Response(200, content=json.dumps(p).encode())
        return httpx.Response(200, content=b"")


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest_asyncio.fixture
async def product_api(make_settings, fake_store) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=make_settings(service="product"))
    http = mock_http(fake_store, "https://fakestore.test")
    app.dependency_overrides[fakestore_client_dep] = lambda: FakeStoreClient(http=http)
    async with serve(app) as client:
        yield client
    await http.aclose()
