"""Campaign CRUD, memberships and the month view."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from influencer_crm.api.deps import campaign_store, influencer_store
from influencer_crm.deals.budget import month_label, parse_month_key
from influencer_crm.domain.models import (
    Campaign,
    CampaignCreate,
    CampaignInfluencer,
    CampaignMemberCreate,
    CampaignMemberUpdate,
    CampaignUpdate,
)
from influencer_crm.domain.types import CampaignStatus
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.influencers import InfluencerStore

logger = structlog.get_logger()

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


class CampaignDetail(BaseModel):
    campaign: Campaign
    members: list[CampaignInfluencer]


class MonthView(BaseModel):
    month: str
    label: str
    campaigns: list[Campaign]


@router.get("")
def list_campaigns(
    status: CampaignStatus | None = None, store: CampaignStore = Depends(campaign_store)
) -> list[Campaign]:
    return store.list_campaigns(status)


@router.get("/month/{month}")
def campaigns_for_month(month: str, store: CampaignStore = Depends(campaign_store)) -> MonthView:
    """Campaigns starting in ``YYYY-MM``, earliest first."""
    try:
        month_start = parse_month_key(month)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return MonthView(
        month=month,
        label=month_label(month_start),
        campaigns=store.list_for_month(month_start),
    )


@router.post("", status_code=201)
def create_campaign(
    payload: CampaignCreate, store: CampaignStore = Depends(campaign_store)
) -> Campaign:
    campaign = store.create(payload)
    logger.info("campaign_created", campaign_id=campaign.id, name=campaign.name)
    return campaign


@router.get("/{campaign_id}")
def get_campaign(campaign_id: str, store: CampaignStore = Depends(campaign_store)) -> CampaignDetail:
    return CampaignDetail(campaign=store.get(campaign_id), members=store.list_members(campaign_id))


@router.patch("/{campaign_id}")
def update_campaign(
    campaign_id: str, payload: CampaignUpdate, store: CampaignStore = Depends(campaign_store)
) -> Campaign:
    return store.update(campaign_id, payload)


@router.delete("/{campaign_id}")
def delete_campaign(
    campaign_id: str, store: CampaignStore = Depends(campaign_store)
) -> dict[str, bool]:
    store.delete(campaign_id)
    logger.info("campaign_deleted", campaign_id=campaign_id)
    return {"success": True}


@router.post("/{campaign_id}/influencers", status_code=201)
def add_member(
    campaign_id: str,
    payload: CampaignMemberCreate,
    store: CampaignStore = Depends(campaign_store),
    influencers: InfluencerStore = Depends(influencer_store),
) -> CampaignInfluencer:
    """Add an influencer; the partnership type defaults to the influencer's own."""
    store.get(campaign_id)
    influencer = influencers.get(payload.influencer_id)
    member = store.add_member(
        campaign_id, payload, default_partnership_type=influencer.partnership_type
    )
    logger.info(
        "campaign_member_added", campaign_id=campaign_id, influencer_id=influencer.id
    )
    return member


@router.patch("/{campaign_id}/influencers/{influencer_id}")
def update_member(
    campaign_id: str,
    influencer_id: str,
    payload: CampaignMemberUpdate,
    store: CampaignStore = Depends(campaign_store),
) -> CampaignInfluencer:
    return store.update_member(campaign_id, influencer_id, payload)


@router.delete("/{campaign_id}/influencers/{influencer_id}")
def remove_member(
    campaign_id: str, influencer_id: str, store: CampaignStore = Depends(campaign_store)
) -> dict[str, bool]:
    store.remove_member(campaign_id, influencer_id)
    return {"success": True}
