"""
org_services.api.problems

Exception-to-HTTP mapping with problem-detail bodies.

Responsibilities:
- Render every error as `application/problem+json` with a stable field set:
  type, title, status, detail, instance, timestamp, traceId (+ errors for validation).
- Register handlers for validation, domain, integrity and HTTP exceptions.
- Provide the catch-all 500 handler used by the trace middleware.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from org_services.errors import ServiceError
from org_services.observability.logging import get_logger

log = get_logger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def problem_response(
    request: Request,
    *,
    status: int,
    title: str,
    detail: str,
    errors: list[dict[str, str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": request.url.path,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "traceId": getattr(request.state, "trace_id", None),
    }
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(
        status_code=status, content=body, media_type=PROBLEM_MEDIA_TYPE, headers=headers
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in _LOCATION_ROOTS:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        ctx = err.get("ctx") or {}
        if err.get("type") == "missing":
            message = f"{field} is required"
        elif err.get("type") == "value_error" and "error" in ctx:
            # Our own validators raise ValueError with a client-facing message.
            message = str(ctx["error"])
        else:
            message = str(err.get("msg", "invalid value"))
        errors.append({"field": field, "message": message})
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = _field_errors(exc)
    log.info("request_validation_failed", errors=errors)
    return problem_response(
        request,
        status=HTTP_400_BAD_REQUEST,
        title="Validation Error",
        detail="Validation failed",
        errors=errors,
    )


async def service_error_handler(request: Request, exc: ServiceError):
    log.info("service_error", error=type(exc).__name__, status=exc.status, detail=exc.detail)
    return problem_response(request, status=exc.status, title=exc.title, detail=exc.detail)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    # A unique constraint lost the race against the pre-insert existence check.
    log.warning("integrity_error", error=str(exc.orig))
    return problem_response(
        request,
        status=HTTP_409_CONFLICT,
        title="Duplicate Key",
        detail="A record with the same unique value already exists",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    title = {404: "Not Found", 405: "Method Not Allowed"}.get(exc.status_code, "HTTP Error")
    detail = exc.detail if isinstance(exc.detail, str) else title
    return problem_response(
        request,
        status=exc.status_code,
        title=title,
        detail=detail,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_exception", error=type(exc).__name__)
    return problem_response(
        request,
        status=HTTP_500_INTERNAL_SERVER_ERROR,
        title="Internal Server Error",
        detail="An unexpected error occurred",
    )


def register_problem_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


# --- Module Notes -----------------------------------------------------------
# The catch-all handler is not registered here: Starlette would run it outside the
# user middleware stack, after the trace context is gone. `TraceIdMiddleware` calls it.
