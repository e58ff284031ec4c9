"""FastAPI endpoint for Shopify order webhooks.

Verifies the base64 HMAC-SHA256 signature against the raw request body bytes
BEFORE JSON parsing, then dispatches on the ``X-Shopify-Topic`` header:

- ``orders/create``: link the real order id to rows holding the draft id
- ``orders/fulfilled`` / ``fulfillments/update``: record the derived status
- ``orders/cancelled``: clear the tracking columns

Once the signature is valid the endpoint always answers 200; processing
errors are logged and left for the next poll so Shopify does not retry.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import json
import re
from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request

from influencer_crm.observability.metrics import ORDER_STATUS_UPDATES, SHOPIFY_WEBHOOKS
from influencer_crm.shopify.status import cleared_tracking, derive_order_status, tracking_changes
from influencer_crm.store.client import utc_now_iso
from influencer_crm.store.orders import OrderStore

logger = structlog.get_logger()

router = APIRouter()

ORDER_WEBHOOK_TOPICS: tuple[str, ...] = (
    "orders/create",
    "orders/fulfilled",
    "fulfillments/update",
    "orders/cancelled",
)

_DRAFT_TAG = re.compile(r"draft_order_(\d+)")


def verify_shopify_hmac(body: bytes, signature: str, secret: str) -> bool:
    """Verify a Shopify webhook signature.

    CRITICAL: Must be called with raw body bytes BEFORE any JSON parsing.

    Args:
        body: The raw request body bytes.
        signature: Base64 digest from the ``X-Shopify-Hmac-Sha256`` header.
        secret: The app's client secret.

    Returns:
        True if the computed signature matches the provided one.
    """
    if not secret or not signature:
        return False
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    computed = base64.b64encode(digest).decode()
    return hmac.compare_digest(computed, signature)


def extract_draft_order_id(order: dict[str, Any]) -> str | None:
    """Find the originating draft order id on a real order.

    Looks for a ``draft_order_id`` note attribute first, then a
    ``draft_order_<id>`` tag.
    """
    for attr in order.get("note_attributes") or []:
        if attr.get("name") == "draft_order_id" and attr.get("value"):
            return str(attr["value"])

    match = _DRAFT_TAG.search(order.get("tags") or "")
    return match.group(1) if match else None


def handle_order_event(topic: str, order: dict[str, Any], store: OrderStore) -> int:
    """Apply one webhook event to the tracking tables.

    Args:
        topic: The Shopify webhook topic.
        order: The order payload.
        store: Order-tracking store.

    Returns:
        The number of tracking rows updated.
    """
    real_order_id = str(order.get("id", ""))
    now = utc_now_iso()

    if topic == "orders/create":
        draft_order_id = extract_draft_order_id(order)
        if draft_order_id is None:
            logger.info("order_create_without_draft_reference", order_id=real_order_id)
            return 0
        return store.update_by_draft_order(
            draft_order_id,
            {"shopify_real_order_id": real_order_id, "order_status_updated_at": now},
        )

    if topic in ("orders/fulfilled", "fulfillments/update"):
        result = derive_order_status(order)
        return store.update_by_real_order(real_order_id, tracking_changes(result, now))

    if topic == "orders/cancelled":
        return store.update_by_real_order(real_order_id, cleared_tracking(now))

    logger.info("shopify_webhook_topic_ignored", topic=topic)
    return 0


@router.post("/webhooks/shopify/orders")
async def shopify_order_webhook(request: Request) -> dict[str, bool]:
    """Receive Shopify order webhooks.

    Raises:
        HTTPException: 401 if the signature is missing or invalid.
    """
    secret = request.app.state.settings.shopify_client_secret.get_secret_value()
    if not secret:
        logger.error("shopify_client_secret_not_configured")

    raw_body = await request.body()
    signature = request.headers.get("X-Shopify-Hmac-Sha256", "")
    if not verify_shopify_hmac(raw_body, signature, secret):
        logger.warning("shopify_webhook_signature_invalid")
        raise HTTPException(status_code=401, detail="Unauthorized")

    topic = request.headers.get("X-Shopify-Topic", "")
    SHOPIFY_WEBHOOKS.labels(topic=topic or "unknown").inc()

    try:
        order: dict[str, Any] = json.loads(raw_body)
        store: OrderStore = request.app.state.services["order_store"]
        updated = await asyncio.to_thread(handle_order_event, topic, order, store)
        ORDER_STATUS_UPDATES.labels(source="webhook").inc(updated)
        logger.info("shopify_webhook_processed", topic=topic, rows_updated=updated)
    except Exception:
        logger.exception("shopify_webhook_processing_failed", topic=topic)

    return {"received": True}
