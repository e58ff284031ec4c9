"""Async Shopify Admin REST client limited to order reconciliation needs.

Covers orders (by id, by customer or email, batched by ids), draft orders,
customers and webhook subscriptions.  Every request goes through
``resilient_api_call`` so transient failures are retried with backoff; what
still fails surfaces as ``ExternalServiceError``.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from influencer_crm.domain.errors import ConfigurationError, ExternalServiceError
from influencer_crm.resilience.retry import resilient_api_call
from influencer_crm.shopify.token import ShopifyTokenProvider, normalize_store_url

logger = structlog.get_logger()

# Shopify's maximum page size and maximum ids per orders.json request
PAGE_LIMIT = 250


class ShopifyClient:
    """Thin async wrapper over the Shopify Admin REST API."""

    def __init__(
        self,
        store_url: str,
        token_provider: ShopifyTokenProvider,
        api_version: str = "2024-01",
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            store_url: Store host, with or without scheme.
            token_provider: Source of the Admin API access token.
            api_version: Admin API version segment.
            http: Optional pre-built ``httpx.AsyncClient`` (tests inject a
                mock transport here).
        """
        self._store = normalize_store_url(store_url)
        self._tokens = token_provider
        self._api_version = api_version
        self._http = http or httpx.AsyncClient(timeout=30.0)

    @property
    def base_url(self) -> str:
        return f"https://{self._store}/admin/api/{self._api_version}"

    @property
    def is_configured(self) -> bool:
        """True when a store URL is set; the token is checked lazily."""
        return bool(self._store)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _headers(self) -> dict[str, str]:
        token = await asyncio.to_thread(self._tokens.get_token)
        if not self._store or not token:
            raise ConfigurationError("Shopify not configured")
        return {"X-Shopify-Access-Token": token, "Content-Type": "application/json"}

    async def ensure_configured(self) -> None:
        """Raise ``ConfigurationError`` unless both store and token are set."""
        await self._headers()

    @resilient_api_call("shopify")
    async def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        json: dict[str, Any] | None,
        headers: dict[str, str],
    ) -> httpx.Response:
        response = await self._http.request(
            method, url, params=params, json=json, headers=headers
        )
        response.raise_for_status()
        return response

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        headers = await self._headers()
        try:
            return await self._send(method, url, params, json, headers)
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                "Shopify",
                f"{method} {exc.request.url.path} failed",
                exc.response.status_code,
                detail=exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError("Shopify", str(exc) or type(exc).__name__) from exc

    async def _get_optional(self, path: str, key: str) -> dict[str, Any] | None:
        try:
            response = await self._request("GET", f"{self.base_url}/{path}")
        except ExternalServiceError as exc:
            if exc.status_code == 404:
                return None
            raise
        payload: dict[str, Any] | None = response.json().get(key)
        return payload

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def get_orders_by_ids(self, order_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch up to 250 orders by id in one request, any status."""
        if len(order_ids) > PAGE_LIMIT:
            raise ValueError(f"At most {PAGE_LIMIT} order ids per request")
        response = await self._request(
            "GET",
            f"{self.base_url}/orders.json",
            params={"ids": ",".join(order_ids), "status": "any"},
        )
        return list(response.json().get("orders", []))

    async def get_order(self, order_id: str) -> dict[str, Any] | None:
        """Fetch one order, or ``None`` if Shopify does not know it."""
        return await self._get_optional(f"orders/{order_id}.json", "order")

    async def get_draft_order(self, draft_order_id: str) -> dict[str, Any] | None:
        """Fetch one draft order, or ``None`` if Shopify does not know it."""
        return await self._get_optional(f"draft_orders/{draft_order_id}.json", "draft_order")

    async def list_orders(self, **filters: str) -> list[dict[str, Any]]:
        """List every order matching *filters*, following ``Link`` pagination.

        Args:
            **filters: Query filters such as ``customer_id`` or ``email``.

        Returns:
            All orders across pages, de-duplicated by id in first-seen order.
        """
        params: dict[str, Any] | None = {**filters, "status": "any", "limit": PAGE_LIMIT}
        url: str | None = f"{self.base_url}/orders.json"
        seen: set[str] = set()
        orders: list[dict[str, Any]] = []

        while url:
            response = await self._request("GET", url, params=params)
            for order in response.json().get("orders", []):
                order_id = str(order.get("id"))
                if order_id not in seen:
                    seen.add(order_id)
                    orders.append(order)
            # The next-page URL already carries every query parameter
            url = response.links.get("next", {}).get("url")
            params = None

        return orders

    # ------------------------------------------------------------------
    # Customers and webhooks
    # ------------------------------------------------------------------

    async def get_customer(self, customer_id: str) -> dict[str, Any] | None:
        return await self._get_optional(f"customers/{customer_id}.json", "customer")

    async def create_webhook(self, topic: str, address: str) -> dict[str, Any]:
        """Subscribe *address* to a webhook *topic* (JSON format)."""
        response = await self._request(
            "POST",
            f"{self.base_url}/webhooks.json",
            json={"webhook": {"topic": topic, "address": address, "format": "json"}},
        )
        return dict(response.json().get("webhook", {}))
