"""Request-scoped access to shared services and cron authentication."""

from __future__ import annotations

import hmac
from typing import Any

import structlog
from fastapi import HTTPException, Request

from influencer_crm.config import Settings
from influencer_crm.shopify.client import ShopifyClient
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.content import ContentStore
from influencer_crm.store.contracts import ContractStore
from influencer_crm.store.deals import DealStore
from influencer_crm.store.influencers import InfluencerStore
from influencer_crm.store.media_kits import MediaKitStore
from influencer_crm.store.orders import OrderStore

logger = structlog.get_logger()


def get_services(request: Request) -> dict[str, Any]:
    return request.app.state.services  # type: ignore[no-any-return]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_service(request: Request, name: str) -> Any:
    """Look up a service by name, answering 503 when it was not initialized."""
    service = get_services(request).get(name)
    if service is None:
        logger.error("service_unavailable", service=name)
        raise HTTPException(status_code=503, detail=f"{name} is not available")
    return service


def require_cron_secret(request: Request) -> None:
    """Require ``Authorization: Bearer <CRON_SECRET>`` when a secret is configured.

    Raises:
        HTTPException: 401 when the header is missing or wrong.
    """
    secret = get_app_settings(request).cron_secret.get_secret_value()
    if not secret:
        return
    header = request.headers.get("Authorization", "")
    if not hmac.compare_digest(header, f"Bearer {secret}"):
        logger.warning("cron_request_unauthorized", path=request.url.path)
        raise HTTPException(status_code=401, detail="Unauthorized")


def influencer_store(request: Request) -> InfluencerStore:
    return get_service(request, "influencer_store")  # type: ignore[no-any-return]


def campaign_store(request: Request) -> CampaignStore:
    return get_service(request, "campaign_store")  # type: ignore[no-any-return]


def deal_store(request: Request) -> DealStore:
    return get_service(request, "deal_store")  # type: ignore[no-any-return]


def contract_store(request: Request) -> ContractStore:
    return get_service(request, "contract_store")  # type: ignore[no-any-return]


def order_store(request: Request) -> OrderStore:
    return get_service(request, "order_store")  # type: ignore[no-any-return]


def content_store(request: Request) -> ContentStore:
    return get_service(request, "content_store")  # type: ignore[no-any-return]


def media_kit_store(request: Request) -> MediaKitStore:
    return get_service(request, "media_kit_store")  # type: ignore[no-any-return]


def shopify_client(request: Request) -> ShopifyClient:
    return get_service(request, "shopify_client")  # type: ignore[no-any-return]
