"""Order-tracking columns and Shopify order history.

Gifting orders are tracked on two tables at once: the per-campaign
``campaign_influencers`` rows and the influencer's own ``influencers`` row.
Both carry the same tracking columns and are updated together, matched by the
draft order id (``shopify_order_id``) or the real order id
(``shopify_real_order_id``).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from supabase import Client

from influencer_crm.domain.models import InfluencerOrder
from influencer_crm.domain.types import IN_PROGRESS_ORDER_STATUSES, ShopifyOrderStatus
from influencer_crm.store.client import rows

TRACKING_TABLES: tuple[str, ...] = ("campaign_influencers", "influencers")
ORDER_HISTORY = "influencer_orders"

_TRACKING_COLUMNS = (
    "id, shopify_order_id, shopify_real_order_id, shopify_order_status, order_status_updated_at"
)


class TrackingRow(BaseModel):
    """The order-tracking columns of one row, tagged with its source table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    table: str
    id: str
    shopify_order_id: str | None = None
    shopify_real_order_id: str | None = None
    shopify_order_status: ShopifyOrderStatus | None = None
    order_status_updated_at: str | None = None

    def is_stale(self, cutoff: datetime) -> bool:
        """True when the row was never synced or last synced before *cutoff*."""
        if not self.order_status_updated_at:
            return True
        synced_at = datetime.fromisoformat(self.order_status_updated_at)
        if synced_at.tzinfo is None:
            synced_at = synced_at.replace(tzinfo=UTC)
        return synced_at < cutoff


class OrderStore:
    """Order-tracking updates and the ``influencer_orders`` history table."""

    def __init__(self, client: Client) -> None:
        self._client = client

    # ------------------------------------------------------------------
    # Tracking columns
    # ------------------------------------------------------------------

    def list_rows_to_sync(self, cutoff: datetime) -> list[TrackingRow]:
        """Return in-progress tracking rows not synced since *cutoff*.

        Rows in status draft, fulfilled or shipped qualify when their
        ``order_status_updated_at`` is null or older than *cutoff*.

        Args:
            cutoff: Timezone-aware staleness threshold.

        Returns:
            Rows from both tracking tables, ``campaign_influencers`` first.
        """
        statuses = [str(s) for s in IN_PROGRESS_ORDER_STATUSES]
        result: list[TrackingRow] = []
        for table in TRACKING_TABLES:
            response = (
                self._client.table(table)
                .select(_TRACKING_COLUMNS)
                .in_("shopify_order_status", statuses)
                .execute()
            )
            for row in rows(response):
                tracked = TrackingRow.model_validate({**row, "table": table})
                if tracked.is_stale(cutoff):
                    result.append(tracked)
        return result

    def update_row(self, table: str, row_id: str, changes: dict[str, Any]) -> None:
        """Write tracking *changes* to a single row."""
        self._client.table(table).update(changes).eq("id", row_id).execute()

    def update_by_draft_order(self, draft_order_id: str, changes: dict[str, Any]) -> int:
        """Apply *changes* to every row holding *draft_order_id*; return rows touched."""
        return self._update_matching("shopify_order_id", draft_order_id, changes)

    def update_by_real_order(self, real_order_id: str, changes: dict[str, Any]) -> int:
        """Apply *changes* to every row holding *real_order_id*; return rows touched."""
        return self._update_matching("shopify_real_order_id", real_order_id, changes)

    def _update_matching(self, column: str, value: str, changes: dict[str, Any]) -> int:
        touched = 0
        for table in TRACKING_TABLES:
            response = self._client.table(table).update(changes).eq(column, value).execute()
            touched += len(rows(response))
        return touched

    # ------------------------------------------------------------------
    # Order history
    # ------------------------------------------------------------------

    def list_orders(self, influencer_id: str) -> list[InfluencerOrder]:
        """List an influencer's synced orders, newest first."""
        response = (
            self._client.table(ORDER_HISTORY)
            .select("*")
            .eq("influencer_id", influencer_id)
            .order("order_date", desc=True)
            .execute()
        )
        return [InfluencerOrder.model_validate(r) for r in rows(response)]

    def delete_foreign_orders(self, influencer_id: str, shopify_customer_id: str) -> int:
        """Delete an influencer's stored orders that belong to a different customer.

        Returns:
            The number of rows removed.
        """
        response = (
            self._client.table(ORDER_HISTORY)
            .select("id, shopify_customer_id")
            .eq("influencer_id", influencer_id)
            .execute()
        )
        wrong_ids = [
            r["id"] for r in rows(response) if r.get("shopify_customer_id") != shopify_customer_id
        ]
        if wrong_ids:
            self._client.table(ORDER_HISTORY).delete().in_("id", wrong_ids).execute()
        return len(wrong_ids)

    def upsert_orders(self, records: list[dict[str, Any]]) -> None:
        """Insert or update order rows keyed by ``shopify_order_id``."""
        if not records:
            return
        self._client.table(ORDER_HISTORY).upsert(records, on_conflict="shopify_order_id").execute()
