"""Paid deals and monthly budgets."""

from __future__ import annotations

from datetime import date

import structlog
from fastapi import APIRouter, Depends, HTTPException

from influencer_crm.api.deps import campaign_store, deal_store
from influencer_crm.deals.budget import MonthSummary, build_monthly_summaries, parse_month_key
from influencer_crm.deals.calculator import apply_rate_card, calculate_total
from influencer_crm.domain.models import BudgetWrite, CampaignDeal, DealWrite, MonthlyBudget
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.deals import DealStore

logger = structlog.get_logger()

router = APIRouter(tags=["deals"])


def _priced(payload: DealWrite, store: DealStore) -> DealWrite:
    rates = store.get_rates(payload.influencer_id)
    deliverables = apply_rate_card(payload.deliverables, rates)
    return payload.model_copy(update={"deliverables": deliverables})


@router.get("/deals")
def list_deals(
    campaign_id: str | None = None,
    influencer_id: str | None = None,
    store: DealStore = Depends(deal_store),
) -> list[CampaignDeal]:
    return store.list_deals(campaign_id, influencer_id)


@router.post("/deals", status_code=201)
def create_deal(payload: DealWrite, store: DealStore = Depends(deal_store)) -> CampaignDeal:
    """Create a deal; unpriced deliverables take the influencer's card rates."""
    priced = _priced(payload, store)
    deal = store.create_deal(priced, calculate_total(priced.deliverables))
    logger.info("deal_created", deal_id=deal.id, total=str(deal.total_deal_value))
    return deal


@router.put("/deals/{deal_id}")
def update_deal(
    deal_id: str, payload: DealWrite, store: DealStore = Depends(deal_store)
) -> CampaignDeal:
    priced = _priced(payload, store)
    return store.update_deal(deal_id, priced, calculate_total(priced.deliverables))


@router.delete("/deals/{deal_id}")
def delete_deal(deal_id: str, store: DealStore = Depends(deal_store)) -> dict[str, bool]:
    store.delete_deal(deal_id)
    return {"success": True}


@router.get("/budgets")
def budget_summary(
    store: DealStore = Depends(deal_store),
    campaigns: CampaignStore = Depends(campaign_store),
) -> list[MonthSummary]:
    """Budget, committed and paid per month, newest first."""
    return build_monthly_summaries(
        budgets=store.list_budgets(),
        campaigns=campaigns.list_campaigns(),
        deals=store.list_deals(),
        today=date.today(),
    )


@router.put("/budgets/{month}")
def set_budget(
    month: str, payload: BudgetWrite, store: DealStore = Depends(deal_store)
) -> MonthlyBudget:
    try:
        month_start = parse_month_key(month)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    budget = store.set_budget(month_start, payload.budget_amount)
    logger.info("budget_set", month=month, amount=str(payload.budget_amount))
    return budget
