"""Sync an influencer's Shopify order history into ``influencer_orders``.

Orders are fetched for the linked customer id; when none come back, the
customer's email is searched instead.  Stored rows from any other customer
id are removed, then every fetched order is upserted by ``shopify_order_id``.
Orders totalling zero are flagged as gifts.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog
from pydantic import BaseModel

from influencer_crm.domain.models import InfluencerOrder
from influencer_crm.shopify.client import ShopifyClient
from influencer_crm.store.client import utc_now_iso
from influencer_crm.store.orders import OrderStore

logger = structlog.get_logger()


class OrderHistorySync(BaseModel):
    """Result of an order-history sync."""

    synced_count: int
    orders: list[InfluencerOrder]


class OrderHistory(BaseModel):
    """An influencer's stored orders and when they were last pulled."""

    orders: list[InfluencerOrder]
    last_synced: str | None = None

    @classmethod
    def from_orders(cls, orders: list[InfluencerOrder]) -> OrderHistory:
        synced = [o.synced_at for o in orders if o.synced_at]
        return cls(orders=orders, last_synced=max(synced) if synced else None)


def _total(order: dict[str, Any]) -> Decimal:
    try:
        return Decimal(str(order.get("total_price") or "0"))
    except InvalidOperation:
        return Decimal("0")


def order_record(
    order: dict[str, Any],
    influencer_id: str,
    shopify_customer_id: str,
    synced_at: str,
) -> dict[str, Any]:
    """Map a Shopify order onto an ``influencer_orders`` row."""
    total = _total(order)
    line_items = [
        {
            "product_name": item.get("title", ""),
            "variant_title": item.get("variant_title"),
            "sku": item.get("sku") or "",
            "quantity": item.get("quantity", 1),
        }
        for item in order.get("line_items") or []
    ]
    return {
        "influencer_id": influencer_id,
        "shopify_order_id": str(order["id"]),
        "shopify_customer_id": shopify_customer_id,
        "order_number": order.get("name", ""),
        "order_date": order.get("created_at"),
        "total_amount": str(total),
        "is_gift": total == 0,
        "line_items": line_items,
        "synced_at": synced_at,
    }


async def sync_order_history(
    influencer_id: str,
    shopify_customer_id: str,
    shopify: ShopifyClient,
    store: OrderStore,
) -> OrderHistorySync:
    """Pull a customer's orders from Shopify and store them for an influencer.

    Args:
        influencer_id: CRM influencer id.
        shopify_customer_id: Linked Shopify customer id.
        shopify: Shopify client.
        store: Order store.

    Returns:
        The number of orders synced and the influencer's stored orders,
        newest first.
    """
    orders = await shopify.list_orders(customer_id=shopify_customer_id)

    if not orders:
        customer = await shopify.get_customer(shopify_customer_id)
        email = (customer or {}).get("email")
        if email:
            logger.info("order_history_email_fallback", influencer_id=influencer_id)
            orders = await shopify.list_orders(email=email)

    synced_at = utc_now_iso()
    records = [order_record(o, influencer_id, shopify_customer_id, synced_at) for o in orders]

    removed = await asyncio.to_thread(
        store.delete_foreign_orders, influencer_id, shopify_customer_id
    )
    await asyncio.to_thread(store.upsert_orders, records)
    stored = await asyncio.to_thread(store.list_orders, influencer_id)

    logger.info(
        "order_history_synced",
        influencer_id=influencer_id,
        fetched=len(records),
        removed_foreign=removed,
    )
    return OrderHistorySync(synced_count=len(records), orders=stored)
