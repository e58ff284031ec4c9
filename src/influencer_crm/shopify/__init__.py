"""Shopify order-status reconciliation: webhooks, polling and order history."""

from influencer_crm.shopify.client import ShopifyClient
from influencer_crm.shopify.history import (
    OrderHistory,
    OrderHistorySync,
    sync_order_history,
)
from influencer_crm.shopify.status import OrderStatusResult, derive_order_status
from influencer_crm.shopify.sync import (
    OrderStatusSyncer,
    SyncResult,
    WebhookRegistration,
    register_order_webhooks,
)
from influencer_crm.shopify.token import ShopifyTokenProvider
from influencer_crm.shopify.webhook import (
    ORDER_WEBHOOK_TOPICS,
    extract_draft_order_id,
    handle_order_event,
    verify_shopify_hmac,
)

__all__ = [
    "ORDER_WEBHOOK_TOPICS",
    "OrderHistory",
    "OrderHistorySync",
    "OrderStatusResult",
    "OrderStatusSyncer",
    "ShopifyClient",
    "ShopifyTokenProvider",
    "SyncResult",
    "WebhookRegistration",
    "derive_order_status",
    "extract_draft_order_id",
    "handle_order_event",
    "register_order_webhooks",
    "sync_order_history",
    "verify_shopify_hmac",
]
