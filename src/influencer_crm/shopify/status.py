"""Derive a gifting order's tracking status from a Shopify order payload.

Mapping, checked in order:

- ``cancelled_at`` set or ``financial_status == "refunded"`` -> cancelled
  (all tracking columns are cleared)
- latest fulfillment ``shipment_status == "delivered"`` -> ``delivered``
- latest fulfillment carries a tracking number -> ``shipped``
- any fulfillment without tracking -> ``fulfilled``
- no fulfillments -> ``draft``
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from influencer_crm.domain.types import ShopifyOrderStatus


class OrderStatusResult(BaseModel):
    """Outcome of mapping a Shopify order onto the CRM's tracking columns."""

    model_config = ConfigDict(frozen=True)

    status: ShopifyOrderStatus | None
    tracking_number: str | None = None
    tracking_url: str | None = None
    cancelled: bool = False


def _first(single: Any, plural: Any) -> str | None:
    if single:
        return str(single)
    if plural:
        return str(plural[0])
    return None


def is_cancelled(order: dict[str, Any]) -> bool:
    return bool(order.get("cancelled_at")) or order.get("financial_status") == "refunded"


def derive_order_status(order: dict[str, Any]) -> OrderStatusResult:
    """Map a Shopify order to a tracking status.

    Args:
        order: The ``order`` object from the Admin API or a webhook body.

    Returns:
        The derived status and tracking details.
    """
    if is_cancelled(order):
        return OrderStatusResult(status=None, cancelled=True)

    fulfillments: list[dict[str, Any]] = order.get("fulfillments") or []
    if not fulfillments:
        return OrderStatusResult(status=ShopifyOrderStatus.DRAFT)

    latest = fulfillments[-1]
    tracking_number = _first(latest.get("tracking_number"), latest.get("tracking_numbers"))
    tracking_url = _first(latest.get("tracking_url"), latest.get("tracking_urls"))

    if latest.get("shipment_status") == "delivered":
        return OrderStatusResult(
            status=ShopifyOrderStatus.DELIVERED,
            tracking_number=tracking_number,
            tracking_url=tracking_url,
        )

    if tracking_number:
        return OrderStatusResult(
            status=ShopifyOrderStatus.SHIPPED,
            tracking_number=tracking_number,
            tracking_url=tracking_url,
        )

    return OrderStatusResult(status=ShopifyOrderStatus.FULFILLED)


def cleared_tracking(synced_at: str) -> dict[str, Any]:
    """Column values that detach a row from a cancelled order."""
    return {
        "shopify_order_status": None,
        "shopify_order_id": None,
        "shopify_real_order_id": None,
        "tracking_number": None,
        "tracking_url": None,
        "order_status_updated_at": synced_at,
    }


def tracking_changes(result: OrderStatusResult, synced_at: str) -> dict[str, Any]:
    """Column values that record *result* on a tracking row."""
    if result.cancelled:
        return cleared_tracking(synced_at)
    return {
        "shopify_order_status": str(result.status) if result.status else None,
        "tracking_number": result.tracking_number,
        "tracking_url": result.tracking_url,
        "order_status_updated_at": synced_at,
    }
