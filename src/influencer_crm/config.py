"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, a cached ``get_settings()`` accessor, and a ``validate_credentials()``
startup gate that enforces credential presence in production mode.

IMPORTANT: This module has ZERO imports from the ``influencer_crm`` package to
prevent circular imports.  Only stdlib, pydantic, pydantic_settings, and
structlog are used.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

# Placeholder value shipped in the example env file; never a real token.
SHOPIFY_TOKEN_PLACEHOLDER = "shpat_xxxxx"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file.

    ``SecretStr`` fields prevent accidental leaks in logs or error output.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False
    port: int = 8000
    app_url: str = ""
    cron_secret: SecretStr = SecretStr("")
    sentry_dsn: str = ""

    # -- Supabase --------------------------------------------------------------
    supabase_url: str = ""
    supabase_service_role_key: SecretStr = SecretStr("")

    # -- Shopify ---------------------------------------------------------------
    shopify_store_url: str = ""
    shopify_access_token: SecretStr = SecretStr("")
    shopify_client_secret: SecretStr = SecretStr("")
    shopify_api_version: str = "2024-01"

    # -- Instagram scrapers ----------------------------------------------------
    rapidapi_key: SecretStr = SecretStr("")
    apify_api_token: SecretStr = SecretStr("")
    brand_instagram_handle: str = "nama"

    # -- CSV import ------------------------------------------------------------
    import_fields_path: Path = Path("config/import_fields.yaml")

    # -- Slack alerts ----------------------------------------------------------
    slack_bot_token: SecretStr = SecretStr("")
    slack_alerts_channel: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    The ``@lru_cache`` decorator ensures environment variables are parsed
    exactly once.  Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The application ``Settings``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # Log only the structured errors list -- never the full exception
        # which may contain raw SecretStr values.
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def validate_credentials(settings: Settings) -> None:
    """Enforce credential presence at startup.

    In **production** mode (``settings.production is True``), the application
    exits with a clear error block if any required credential is missing.

    In **development** mode, each missing credential is logged as a warning
    but the application continues to start.

    Args:
        settings: The loaded application settings.
    """
    errors: list[str] = []

    if not settings.supabase_url:
        errors.append("SUPABASE_URL is empty or not set")

    if not settings.supabase_service_role_key.get_secret_value():
        errors.append("SUPABASE_SERVICE_ROLE_KEY is empty or not set")

    if not settings.shopify_store_url:
        errors.append("SHOPIFY_STORE_URL is empty or not set")

    # Webhook HMAC verification is impossible without the app secret
    if not settings.shopify_client_secret.get_secret_value():
        errors.append("SHOPIFY_CLIENT_SECRET is empty or not set")

    if not errors:
        logger.info("credential_validation_passed")
        return

    if settings.production:
        for err in errors:
            logger.error("credential_missing", detail=err)
        print("\n=== STARTUP FAILED ===", file=sys.stderr)
        print("Missing required credentials for production mode:", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        print("======================\n", file=sys.stderr)
        sys.exit(1)
    else:
        for err in errors:
            logger.warning("credential_missing_dev", detail=err)
