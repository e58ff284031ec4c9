"""Supabase client construction and helpers shared by the table stores.

All persistence goes through the supabase-py PostgREST query builders.  The
client is synchronous; async callers wrap store calls in
``asyncio.to_thread``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import structlog
from supabase import Client, create_client

from influencer_crm.config import Settings
from influencer_crm.domain.errors import ConfigurationError

logger = structlog.get_logger()

# PostgreSQL error code for unique_violation
UNIQUE_VIOLATION = "23505"


def create_supabase_client(settings: Settings) -> Client:
    """Create a service-role Supabase client from *settings*.

    Args:
        settings: Application settings holding ``SUPABASE_URL`` and
            ``SUPABASE_SERVICE_ROLE_KEY``.

    Returns:
        A configured supabase ``Client``.

    Raises:
        ConfigurationError: If either credential is empty.
    """
    key = settings.supabase_service_role_key.get_secret_value()
    if not settings.supabase_url or not key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")

    client = create_client(settings.supabase_url, key)
    logger.info("supabase_client_initialized", url=settings.supabase_url)
    return client


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the format PostgREST expects."""
    return datetime.now(tz=UTC).isoformat()


def rows(response: Any) -> list[dict[str, Any]]:
    """Return the row list from a PostgREST response (``[]`` when empty)."""
    return list(response.data or [])
