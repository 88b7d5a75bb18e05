"""
org_services.observability.middleware

HTTP middleware for request-scoped trace context.

Responsibilities:
- Accept or generate the `X-Trace-Id` header and echo it on every response.
- Bind trace metadata into structlog contextvars.
- Turn exceptions nothing else handled into a 500 problem response, so that
  the error body and header still carry the trace id.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from org_services.api.problems import unhandled_exception_handler

TRACE_ID_HEADER = "X-Trace-Id"


class TraceIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())
        request.state.trace_id = trace_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            trace_id=trace_id,
            path=request.url.path,
            method=request.method,
        )
        try:
            try:
                response: Response = await call_next(request)
            except Exception as exc:
                response = await unhandled_exception_handler(request, exc)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers[TRACE_ID_HEADER] = trace_id
        return response


def current_trace_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("trace_id")
