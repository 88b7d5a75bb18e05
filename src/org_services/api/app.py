"""
org_services.api.app

FastAPI app factories for the department, employee, product and config services.

Responsibilities:
- Build each service's FastAPI application and register routers/middleware/handlers.
- Initialize and dispose shared infrastructure in the lifespan (DB engine, event
  publisher/consumer, HTTP clients, caches).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Awaitable, Callable

import httpx
from fastapi import APIRouter, FastAPI

from org_services import __version__
from org_services.api.problems import register_problem_handlers
from org_services.api.routers.config import router as config_router
from org_services.api.routers.departments import router as departments_router
from org_services.api.routers.employees import router as employees_router
from org_services.api.routers.employees import router_v2 as employees_v2_router
from org_services.api.routers.health import router as health_router
from org_services.api.routers.products import router as products_router
from org_services.cache import build_cache
from org_services.db.init_db import init_db
from org_services.db.session import create_engine, create_sessionmaker
from org_services.events.consumer import EventConsumer
from org_services.events.handlers import handlers_for
from org_services.events.publisher import build_publisher
from org_services.observability.logging import configure_logging, get_logger
from org_services.observability.middleware import TraceIdMiddleware
from org_services.services.idempotency import IdempotencyStore
from org_services.settings import Settings

log = get_logger(__name__)

Setup = Callable[[FastAPI, contextlib.AsyncExitStack], Awaitable[None]]


async def _setup_database(app: FastAPI, stack: contextlib.AsyncExitStack, settings: Settings) -> None:
    # One async engine and session factory per process; routers get sessions via deps.
    engine = create_engine(settings)
    stack.push_async_callback(engine.dispose)
    app.state.engine = engine
    app.state.sessionmaker = create_sessionmaker(engine)
    if settings.env in ("dev", "test"):
        # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
        await init_db(engine)


async def _setup_events(app: FastAPI, stack: contextlib.AsyncExitStack, settings: Settings) -> None:
    publisher = build_publisher(settings)
    await publisher.start()
    stack.push_async_callback(publisher.stop)
    app.state.publisher = publisher

    if settings.kafka_consumer_enabled:
        consumer = EventConsumer(
            bootstrap_servers=settings.kafka_bootstrap_servers,
            group_id=f"{settings.service}-service-group",
            handlers=handlers_for(settings.service),
        )
        await consumer.start()
        stack.push_async_callback(consumer.stop)
        app.state.consumer = consumer


async def _setup_cache(app: FastAPI, stack: contextlib.AsyncExitStack, settings: Settings) -> None:
    cache = build_cache(settings)
    stack.push_async_callback(cache.close)
    app.state.cache = cache


def _http_client(stack: contextlib.AsyncExitStack, *, base_url: str, timeout: float) -> httpx.AsyncClient:
    client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
    stack.push_async_callback(client.aclose)
    return client


def _build(
    settings: Settings,
    *,
    title: str,
    routers: list[APIRouter],
    setup: Setup,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, service=settings.service)
        async with contextlib.AsyncExitStack() as stack:
            await setup(app, stack)
            yield
        log.info("shutdown", service=settings.service)

    app = FastAPI(
        title=title,
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(TraceIdMiddleware)
    register_problem_handlers(app)
    app.include_router(health_router, tags=["health"])
    for router in routers:
        app.include_router(router)
    return app


def create_department_app(*, settings: Settings) -> FastAPI:
    async def setup(app: FastAPI, stack: contextlib.AsyncExitStack) -> None:
        await _setup_database(app, stack, settings)
        await _setup_events(app, stack, settings)

    return _build(settings, title="Department Service", routers=[departments_router], setup=setup)


def create_employee_app(*, settings: Settings) -> FastAPI:
    async def setup(app: FastAPI, stack: contextlib.AsyncExitStack) -> None:
        await _setup_database(app, stack, settings)
        await _setup_events(app, stack, settings)
        await _setup_cache(app, stack, settings)
        app.state.department_http = _http_client(
            stack,
            base_url=settings.department_service_url,
            timeout=settings.http_timeout_seconds,
        )
        app.state.idempotency = IdempotencyStore(
            max_entries=settings.idempotency_max_entries,
            ttl_seconds=settings.idempotency_ttl_seconds,
        )

    return _build(
        settings,
        title="Employee Service",
        routers=[employees_router, employees_v2_router],
        setup=setup,
    )


def create_product_app(*, settings: Settings) -> FastAPI:
    async def setup(app: FastAPI, stack: contextlib.AsyncExitStack) -> None:
        await _setup_cache(app, stack, settings)
        app.state.fakestore_http = _http_client(
            stack,
            base_url=settings.product_api_base_url,
            timeout=settings.http_timeout_seconds,
        )

    return _build(settings, title="Product Service", routers=[products_router], setup=setup)


def create_config_app(*, settings: Settings) -> FastAPI:
    async def setup(app: FastAPI, stack: contextlib.AsyncExitStack) -> None:
        log.info("config_repo", path=settings.config_repo_dir)

    # Catch-all `/{application}/{profile}` goes last so health routes keep priority.
    return _build(settings, title="Config Server", routers=[config_router], setup=setup)


_FACTORIES: dict[str, Callable[..., FastAPI]] = {
    "department": create_department_app,
    "employee": create_employee_app,
    "product": create_product_app,
    "config": create_config_app,
}


def create_app(*, settings: Settings) -> FastAPI:
    return _FACTORIES[settings.service](settings=settings)


# --- Module Notes -----------------------------------------------------------
# Resources are registered on an AsyncExitStack as they are created, so a failure
# half-way through startup still closes whatever was already opened.
