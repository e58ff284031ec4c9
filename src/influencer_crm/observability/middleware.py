"""Request ID middleware for HTTP request tracing.

Every response carries an ``X-Request-ID`` header, echoed from the client or
generated, and the same ID is bound into structlog contextvars so all log
entries for the request share one ``request_id`` field.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SERVICE_NAME = "influencer-crm"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every HTTP request/response cycle."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            service=SERVICE_NAME,
            path=request.url.path,
        )
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
