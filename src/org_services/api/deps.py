"""
org_services.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and paging.
- Encapsulate app.state access patterns (sessionmaker, publisher, cache, HTTP clients).
- Assemble request-scoped services from those collaborators.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from org_services.cache import Cache
from org_services.clients.departments import DepartmentClient
from org_services.clients.fakestore import FakeStoreClient
from org_services.db.paging import Pageable
from org_services.events.publisher import EventPublisher
from org_services.services.config_repo import ConfigRepository
from org_services.services.departments import DepartmentService
from org_services.services.employees import EmployeeService
from org_services.services.idempotency import IdempotencyStore
from org_services.services.products import ProductService
from org_services.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are pinned on app.state by `create_app`, so tests can pass their own.
    return request.app.state.settings


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def pageable_dep(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=1000),
    sort: list[str] | None = Query(default=None),
) -> Pageable:
    return Pageable.parse(page=page, size=size, sort=sort or ())


def publisher_dep(request: Request) -> EventPublisher:
    return request.app.state.publisher


def cache_dep(request: Request) -> Cache:
    return request.app.state.cache


def idempotency_dep(request: Request) -> IdempotencyStore:
    return request.app.state.idempotency


def department_client_dep(request: Request) -> DepartmentClient:
    return DepartmentClient(http=request.app.state.department_http)


def fakestore_client_dep(request: Request) -> FakeStoreClient:
    return FakeStoreClient(http=request.app.state.fakestore_http)


def config_repository_dep(settings: Settings = Depends(settings_dep)) -> ConfigRepository:
    return ConfigRepository(settings.config_repo_dir)


def department_service_dep(
    session: AsyncSession = Depends(db_session),
    publisher: EventPublisher = Depends(publisher_dep),
    settings: Settings = Depends(settings_dep),
) -> DepartmentService:
    return DepartmentService(
        session=session,
        publisher=publisher,
        notification_recipient=settings.notification_recipient,
    )


def employee_service_dep(
    session: AsyncSession = Depends(db_session),
    departments: DepartmentClient = Depends(department_client_dep),
    publisher: EventPublisher = Depends(publisher_dep),
    idempotency: IdempotencyStore = Depends(idempotency_dep),
) -> EmployeeService:
    return EmployeeService(
        session=session,
        departments=departments,
        publisher=publisher,
        idempotency=idempotency,
    )


def product_service_dep(
    client: FakeStoreClient = Depends(fakestore_client_dep),
) -> ProductService:
    return ProductService(client=client)


# --- Module Notes -----------------------------------------------------------
# Tests swap collaborators through `app.dependency_overrides` on the *_dep functions
# (publisher, department client, FakeStore client) rather than patching modules.
