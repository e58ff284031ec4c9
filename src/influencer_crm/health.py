"""Health and readiness endpoints for container orchestration.

Provides two top-level routes:

- ``GET /health`` -- Liveness check.  Returns 200 if the process is alive.
- ``GET /ready``  -- Readiness check.  Returns 200 only when a Supabase query
  succeeds **and** the Shopify client has a store configured.  Returns 503
  with per-check details otherwise.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


def register_health_routes(app: FastAPI) -> None:
    """Register ``/health`` and ``/ready`` endpoints on *app*.

    Args:
        app: The FastAPI application instance.
    """

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check -- always returns 200 if the process is running."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        """Readiness check -- checks Supabase and Shopify configuration."""
        services: dict[str, Any] = request.app.state.services
        checks: dict[str, str] = {}

        supabase = services.get("supabase")
        if supabase is not None:
            try:
                query = supabase.table("app_settings").select("key").limit(1)
                await asyncio.to_thread(query.execute)
                checks["supabase"] = "ok"
            except Exception:
                logger.warning("readiness_supabase_failed", exc_info=True)
                checks["supabase"] = "fail"
        else:
            checks["supabase"] = "fail"

        shopify = services.get("shopify_client")
        checks["shopify"] = "ok" if shopify is not None and shopify.is_configured else "fail"

        all_ok = all(v == "ok" for v in checks.values())
        status = "ready" if all_ok else "not_ready"
        code = 200 if all_ok else 503

        return JSONResponse(content={"status": status, "checks": checks}, status_code=code)
