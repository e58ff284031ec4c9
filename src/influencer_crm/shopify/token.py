"""Shopify Admin API access-token resolution.

The token comes from ``SHOPIFY_ACCESS_TOKEN`` when it holds a real value,
otherwise from the ``shopify_access_token`` key of the ``app_settings`` table
(written when the store was connected).  The resolved token is cached for the
life of the provider; call :meth:`ShopifyTokenProvider.clear_cache` after the
stored token changes.
"""

from __future__ import annotations

import structlog

from influencer_crm.config import SHOPIFY_TOKEN_PLACEHOLDER, Settings
from influencer_crm.store.app_settings import AppSettingsStore

logger = structlog.get_logger()

SHOPIFY_TOKEN_KEY = "shopify_access_token"


class ShopifyTokenProvider:
    """Resolve and cache the Shopify access token."""

    def __init__(self, settings: Settings, app_settings: AppSettingsStore | None = None) -> None:
        self._settings = settings
        self._app_settings = app_settings
        self._cached: str | None = None

    def get_token(self) -> str | None:
        """Return the access token, or ``None`` when the store is not connected."""
        if self._cached:
            return self._cached

        env_token = self._settings.shopify_access_token.get_secret_value()
        if env_token and env_token != SHOPIFY_TOKEN_PLACEHOLDER:
            self._cached = env_token
            return self._cached

        if self._app_settings is None:
            return None

        stored = self._app_settings.get(SHOPIFY_TOKEN_KEY)
        if not stored:
            logger.warning("shopify_token_missing")
            return None

        self._cached = stored
        return self._cached

    def clear_cache(self) -> None:
        self._cached = None


def normalize_store_url(store_url: str) -> str:
    """Reduce a store URL to its bare host, e.g. ``nama.myshopify.com``."""
    host = store_url.strip()
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix) :]
    return host.rstrip("/")
