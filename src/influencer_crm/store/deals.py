"""Deal, rate-card and monthly-budget table access."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from supabase import Client

from influencer_crm.domain.errors import NotFoundError
from influencer_crm.domain.models import (
    CampaignDeal,
    DealWrite,
    InfluencerRates,
    MonthlyBudget,
    RatesWrite,
)
from influencer_crm.store.client import rows, utc_now_iso

DEALS = "campaign_deals"
RATES = "influencer_rates"
BUDGETS = "monthly_budgets"


def _deal_record(payload: DealWrite, total: Decimal) -> dict[str, Any]:
    record = payload.model_dump(mode="json")
    record["total_deal_value"] = str(total)
    return record


class DealStore:
    """Read and write paid-deal terms, rate cards and monthly budgets."""

    def __init__(self, client: Client) -> None:
        self._client = client

    # ------------------------------------------------------------------
    # Deals
    # ------------------------------------------------------------------

    def list_deals(
        self, campaign_id: str | None = None, influencer_id: str | None = None
    ) -> list[CampaignDeal]:
        query = self._client.table(DEALS).select("*")
        if campaign_id is not None:
            query = query.eq("campaign_id", campaign_id)
        if influencer_id is not None:
            query = query.eq("influencer_id", influencer_id)
        response = query.order("created_at").execute()
        return [CampaignDeal.model_validate(r) for r in rows(response)]

    def get_deal(self, deal_id: str) -> CampaignDeal:
        data = rows(self._client.table(DEALS).select("*").eq("id", deal_id).execute())
        if not data:
            raise NotFoundError("deal", deal_id)
        return CampaignDeal.model_validate(data[0])

    def create_deal(self, payload: DealWrite, total: Decimal) -> CampaignDeal:
        """Insert a deal with its precomputed ``total_deal_value``."""
        data = rows(self._client.table(DEALS).insert(_deal_record(payload, total)).execute())
        return CampaignDeal.model_validate(data[0])

    def update_deal(self, deal_id: str, payload: DealWrite, total: Decimal) -> CampaignDeal:
        record = _deal_record(payload, total)
        record["updated_at"] = utc_now_iso()
        data = rows(self._client.table(DEALS).update(record).eq("id", deal_id).execute())
        if not data:
            raise NotFoundError("deal", deal_id)
        return CampaignDeal.model_validate(data[0])

    def delete_deal(self, deal_id: str) -> None:
        data = rows(self._client.table(DEALS).delete().eq("id", deal_id).execute())
        if not data:
            raise NotFoundError("deal", deal_id)

    # ------------------------------------------------------------------
    # Rate cards
    # ------------------------------------------------------------------

    def get_rates(self, influencer_id: str) -> InfluencerRates | None:
        data = rows(
            self._client.table(RATES).select("*").eq("influencer_id", influencer_id).execute()
        )
        return InfluencerRates.model_validate(data[0]) if data else None

    def upsert_rates(self, influencer_id: str, payload: RatesWrite) -> InfluencerRates:
        """Create or replace an influencer's rate card."""
        record = payload.model_dump(mode="json")
        record["influencer_id"] = influencer_id
        data = rows(
            self._client.table(RATES).upsert(record, on_conflict="influencer_id").execute()
        )
        return InfluencerRates.model_validate(data[0])

    # ------------------------------------------------------------------
    # Monthly budgets
    # ------------------------------------------------------------------

    def list_budgets(self) -> list[MonthlyBudget]:
        response = self._client.table(BUDGETS).select("*").order("month", desc=True).execute()
        return [MonthlyBudget.model_validate(r) for r in rows(response)]

    def set_budget(self, month: date, amount: Decimal) -> MonthlyBudget:
        """Create or replace the budget for the month starting on *month*."""
        record = {"month": month.isoformat(), "budget_amount": str(amount)}
        data = rows(self._client.table(BUDGETS).upsert(record, on_conflict="month").execute())
        return MonthlyBudget.model_validate(data[0])
