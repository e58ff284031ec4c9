"""Shopify order endpoints: status poll, webhook registration and order history."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from influencer_crm.api.deps import (
    get_app_settings,
    get_service,
    influencer_store,
    order_store,
    require_cron_secret,
    shopify_client,
)
from influencer_crm.domain.errors import ConfigurationError
from influencer_crm.domain.models import OrderSyncRequest
from influencer_crm.shopify.client import ShopifyClient
from influencer_crm.shopify.history import OrderHistory, OrderHistorySync, sync_order_history
from influencer_crm.shopify.sync import OrderStatusSyncer, SyncResult, register_order_webhooks
from influencer_crm.store.influencers import InfluencerStore
from influencer_crm.store.orders import OrderStore

logger = structlog.get_logger()

router = APIRouter(tags=["orders"])


@router.get("/cron/sync-order-status", dependencies=[Depends(require_cron_secret)])
async def sync_order_status(request: Request) -> SyncResult:
    """Poll Shopify for every stale in-progress order."""
    syncer: OrderStatusSyncer = get_service(request, "order_syncer")
    return await syncer.sync()


@router.post("/shopify/webhooks/register", dependencies=[Depends(require_cron_secret)])
async def register_webhooks(
    request: Request, shopify: ShopifyClient = Depends(shopify_client)
) -> JSONResponse:
    """Subscribe to the order topics; 207 when any subscription failed."""
    app_url = get_app_settings(request).app_url
    if not app_url:
        raise ConfigurationError("APP_URL not configured")

    results = await register_order_webhooks(shopify, app_url)
    all_ok = all(r.success for r in results)
    return JSONResponse(
        status_code=200 if all_ok else 207,
        content={"results": [r.model_dump() for r in results]},
    )


@router.get("/influencers/{influencer_id}/orders")
def list_orders(
    influencer_id: str, store: OrderStore = Depends(order_store)
) -> OrderHistory:
    return OrderHistory.from_orders(store.list_orders(influencer_id))


@router.post("/influencers/{influencer_id}/orders/sync")
async def sync_orders(
    influencer_id: str,
    payload: OrderSyncRequest | None = None,
    influencers: InfluencerStore = Depends(influencer_store),
    store: OrderStore = Depends(order_store),
    shopify: ShopifyClient = Depends(shopify_client),
) -> OrderHistorySync:
    """Pull the influencer's Shopify order history.

    A customer id in the body replaces the one stored on the influencer.
    """
    influencer = await asyncio.to_thread(influencers.get, influencer_id)
    customer_id = (payload.shopify_customer_id if payload else None) or (
        influencer.shopify_customer_id
    )
    if not customer_id:
        raise HTTPException(status_code=400, detail="Influencer has no Shopify customer id")

    if customer_id != influencer.shopify_customer_id:
        changes: dict[str, Any] = {"shopify_customer_id": customer_id}
        await asyncio.to_thread(influencers.update_fields, influencer_id, changes)

    return await sync_order_history(influencer_id, customer_id, shopify, store)
