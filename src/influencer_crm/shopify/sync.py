"""Polling reconciliation of order-tracking rows against Shopify.

Webhooks keep most rows current; this poller catches what they miss.  Rows
in an in-progress status (draft, fulfilled, shipped) that have not been
synced for four hours are re-checked:

- rows with a real order id are fetched in batches of 250 ids;
- rows with only a draft id fetch their draft order, and a completed draft
  with an ``order_id`` is linked to the real order and its status.

Failures are logged per batch or row and retried on the next poll.  A store
without Shopify credentials fails the whole poll with ``ConfigurationError``.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from pydantic import BaseModel

from influencer_crm.domain.errors import ConfigurationError, ExternalServiceError
from influencer_crm.observability.metrics import ORDER_STATUS_UPDATES
from influencer_crm.shopify.client import PAGE_LIMIT, ShopifyClient
from influencer_crm.shopify.status import derive_order_status, tracking_changes
from influencer_crm.shopify.webhook import ORDER_WEBHOOK_TOPICS
from influencer_crm.store.client import utc_now_iso
from influencer_crm.store.orders import OrderStore, TrackingRow

logger = structlog.get_logger()

STALE_AFTER = timedelta(hours=4)


class SyncResult(BaseModel):
    """Summary returned by one poll."""

    message: str
    updated: int


class WebhookRegistration(BaseModel):
    """Outcome of subscribing to one webhook topic."""

    topic: str
    success: bool
    error: str | None = None


class OrderStatusSyncer:
    """Reconcile stale tracking rows with Shopify."""

    def __init__(self, store: OrderStore, shopify: ShopifyClient) -> None:
        self._store = store
        self._shopify = shopify

    async def sync(self, now: datetime | None = None) -> SyncResult:
        """Run one reconciliation pass.

        Args:
            now: Reference time for the staleness cutoff (defaults to now, UTC).

        Returns:
            A message and the number of rows touched.

        Raises:
            ConfigurationError: If the Shopify store or token is missing.
        """
        await self._shopify.ensure_configured()
        now = now or datetime.now(tz=UTC)
        rows = await asyncio.to_thread(self._store.list_rows_to_sync, now - STALE_AFTER)
        if not rows:
            return SyncResult(message="No rows to sync", updated=0)

        with_real_order = [r for r in rows if r.shopify_real_order_id]
        draft_only = [r for r in rows if not r.shopify_real_order_id and r.shopify_order_id]
        synced_at = utc_now_iso()

        updated = await self._sync_real_orders(with_real_order, synced_at)
        updated += await self._sync_draft_orders(draft_only, synced_at)

        ORDER_STATUS_UPDATES.labels(source="poll").inc(updated)
        logger.info(
            "order_status_sync_complete",
            candidates=len(rows),
            updated=updated,
        )
        return SyncResult(message="Sync complete", updated=updated)

    async def _write(self, row: TrackingRow, changes: dict[str, Any]) -> None:
        await asyncio.to_thread(self._store.update_row, row.table, row.id, changes)

    async def _sync_real_orders(self, rows: list[TrackingRow], synced_at: str) -> int:
        order_ids = list(dict.fromkeys(str(r.shopify_real_order_id) for r in rows))
        updated = 0

        for start in range(0, len(order_ids), PAGE_LIMIT):
            batch = order_ids[start : start + PAGE_LIMIT]
            try:
                orders = await self._shopify.get_orders_by_ids(batch)
            except ConfigurationError:
                raise
            except Exception:
                logger.exception("order_batch_fetch_failed", batch_size=len(batch))
                continue

            by_id = {str(o.get("id")): o for o in orders}
            for row in rows:
                order = by_id.get(str(row.shopify_real_order_id))
                if order is None:
                    continue
                try:
                    result = derive_order_status(order)
                    if result.cancelled or result.status != row.shopify_order_status:
                        await self._write(row, tracking_changes(result, synced_at))
                    else:
                        await self._write(row, {"order_status_updated_at": synced_at})
                    updated += 1
                except Exception:
                    logger.exception("order_row_update_failed", table=row.table, row_id=row.id)

        return updated

    async def _sync_draft_orders(self, rows: list[TrackingRow], synced_at: str) -> int:
        updated = 0
        for row in rows:
            try:
                draft = await self._shopify.get_draft_order(str(row.shopify_order_id))
                if draft is None:
                    continue

                if draft.get("status") == "completed" and draft.get("order_id"):
                    await self._write(row, await self._link_completed_draft(draft, synced_at))
                else:
                    await self._write(row, {"order_status_updated_at": synced_at})
                updated += 1
            except ConfigurationError:
                raise
            except Exception:
                logger.exception(
                    "draft_order_check_failed",
                    table=row.table,
                    draft_order_id=row.shopify_order_id,
                )
        return updated

    async def _link_completed_draft(self, draft: dict[str, Any], synced_at: str) -> dict[str, Any]:
        real_order_id = str(draft["order_id"])
        try:
            order = await self._shopify.get_order(real_order_id)
        except ExternalServiceError:
            logger.warning("real_order_fetch_failed", order_id=real_order_id, exc_info=True)
            order = None

        if order is None:
            return {"shopify_real_order_id": real_order_id, "order_status_updated_at": synced_at}

        result = derive_order_status(order)
        changes = tracking_changes(result, synced_at)
        if not result.cancelled:
            changes["shopify_real_order_id"] = real_order_id
        return changes


async def register_order_webhooks(
    shopify: ShopifyClient, app_url: str
) -> list[WebhookRegistration]:
    """Subscribe the order webhook endpoint to every order topic.

    Args:
        shopify: Shopify client.
        app_url: Public base URL of this service.

    Returns:
        One registration result per topic.
    """
    address = f"{app_url.rstrip('/')}/webhooks/shopify/orders"
    results: list[WebhookRegistration] = []
    for topic in ORDER_WEBHOOK_TOPICS:
        try:
            await shopify.create_webhook(topic, address)
            results.append(WebhookRegistration(topic=topic, success=True))
        except ExternalServiceError as exc:
            results.append(
                WebhookRegistration(topic=topic, success=False, error=exc.detail or str(exc))
            )
        logger.info("shopify_webhook_registered", topic=topic, success=results[-1].success)
    return results
