"""Translate domain errors into HTTP responses."""

from __future__ import annotations

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from influencer_crm.domain.errors import (
    ConfigurationError,
    CRMError,
    DuplicateError,
    ExternalServiceError,
    LookupRejectedError,
    NotFoundError,
)

logger = structlog.get_logger()

_STATUS_CODES: list[tuple[type[CRMError], int]] = [
    (NotFoundError, 404),
    (DuplicateError, 409),
    (LookupRejectedError, 400),
    (ConfigurationError, 500),
    (ExternalServiceError, 502),
]


def status_for(exc: CRMError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Answer every :class:`CRMError` with ``{"error": message}``.

    An ``httpx`` failure that escaped its client wrapper is answered with a 502.
    """

    @app.exception_handler(CRMError)
    async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                "request_failed",
                path=request.url.path,
                error_type=type(exc).__name__,
                error=str(exc),
            )
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.exception_handler(httpx.HTTPError)
    async def upstream_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.error(
            "upstream_request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=502, content={"error": "Upstream service request failed"})
