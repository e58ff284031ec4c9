"""Influencer CRUD, rate cards, media kits and per-influencer lookups."""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from influencer_crm.api.deps import (
    campaign_store,
    content_store,
    deal_store,
    influencer_store,
    media_kit_store,
)
from influencer_crm.deals.whitelisting import WhitelistingOverview, build_overview
from influencer_crm.domain.models import (
    CampaignInfluencer,
    ContentItem,
    Influencer,
    InfluencerCreate,
    InfluencerMediaKit,
    InfluencerRates,
    InfluencerUpdate,
    RatesWrite,
)
from influencer_crm.domain.types import PartnershipType, RelationshipStatus, WhitelistingType
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.content import ContentStore
from influencer_crm.store.deals import DealStore
from influencer_crm.store.influencers import InfluencerStore
from influencer_crm.store.media_kits import MediaKitStore

logger = structlog.get_logger()

router = APIRouter(prefix="/influencers", tags=["influencers"])

MEDIA_KIT_PDF = "application/pdf"


@router.get("")
def list_influencers(
    partnership_type: PartnershipType | None = None,
    relationship_status: RelationshipStatus | None = None,
    search: str | None = None,
    whitelisting_enabled: bool | None = None,
    whitelisting_type: WhitelistingType | None = None,
    store: InfluencerStore = Depends(influencer_store),
) -> list[Influencer]:
    return store.list_influencers(
        partnership_type=partnership_type,
        relationship_status=relationship_status,
        search=search,
        whitelisting_enabled=whitelisting_enabled,
        whitelisting_type=whitelisting_type,
    )


@router.post("", status_code=201)
def create_influencer(
    payload: InfluencerCreate, store: InfluencerStore = Depends(influencer_store)
) -> Influencer:
    """Create an influencer; 409 when the handle is already taken."""
    influencer = store.create(payload)
    logger.info("influencer_created", influencer_id=influencer.id)
    return influencer


@router.get("/{influencer_id}")
def get_influencer(
    influencer_id: str, store: InfluencerStore = Depends(influencer_store)
) -> Influencer:
    return store.get(influencer_id)


@router.patch("/{influencer_id}")
def update_influencer(
    influencer_id: str,
    payload: InfluencerUpdate,
    store: InfluencerStore = Depends(influencer_store),
) -> Influencer:
    return store.update(influencer_id, payload)


@router.delete("/{influencer_id}")
def delete_influencer(
    influencer_id: str, store: InfluencerStore = Depends(influencer_store)
) -> dict[str, bool]:
    store.delete(influencer_id)
    logger.info("influencer_deleted", influencer_id=influencer_id)
    return {"success": True}


@router.get("/{influencer_id}/rates")
def get_rates(
    influencer_id: str, deals: DealStore = Depends(deal_store)
) -> InfluencerRates | None:
    return deals.get_rates(influencer_id)


@router.put("/{influencer_id}/rates")
def put_rates(
    influencer_id: str,
    payload: RatesWrite,
    store: InfluencerStore = Depends(influencer_store),
    deals: DealStore = Depends(deal_store),
) -> InfluencerRates:
    store.get(influencer_id)
    return deals.upsert_rates(influencer_id, payload)


@router.get("/{influencer_id}/content")
def list_content(
    influencer_id: str, content: ContentStore = Depends(content_store)
) -> list[ContentItem]:
    return content.list_for_influencer(influencer_id)


@router.get("/{influencer_id}/campaigns")
def list_memberships(
    influencer_id: str, campaigns: CampaignStore = Depends(campaign_store)
) -> list[CampaignInfluencer]:
    return campaigns.list_memberships_for(influencer_id)


@router.get("/{influencer_id}/whitelisting")
def whitelisting_overview(
    influencer_id: str,
    store: InfluencerStore = Depends(influencer_store),
    deals: DealStore = Depends(deal_store),
) -> WhitelistingOverview:
    """Whitelisting terms and every ad-usage window, soonest expiry first."""
    influencer = store.get(influencer_id)
    return build_overview(influencer, deals.list_deals(influencer_id=influencer_id), date.today())


@router.get("/{influencer_id}/media-kits")
def list_media_kits(
    influencer_id: str, kits: MediaKitStore = Depends(media_kit_store)
) -> list[InfluencerMediaKit]:
    return kits.list_for_influencer(influencer_id)


@router.post("/{influencer_id}/media-kits", status_code=201)
async def upload_media_kit(
    influencer_id: str,
    file: Annotated[UploadFile, File(description="Media kit image or PDF")],
    store: InfluencerStore = Depends(influencer_store),
    kits: MediaKitStore = Depends(media_kit_store),
) -> InfluencerMediaKit:
    """Upload an image or PDF media kit for an influencer."""
    content_type = file.content_type or ""
    if not (content_type.startswith("image/") or content_type == MEDIA_KIT_PDF):
        raise HTTPException(status_code=415, detail="Media kits must be images or PDFs")
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    await asyncio.to_thread(store.get, influencer_id)
    data = await file.read()
    return await asyncio.to_thread(kits.add, influencer_id, file.filename, data, content_type)


@router.delete("/{influencer_id}/media-kits/{media_kit_id}")
def delete_media_kit(
    influencer_id: str, media_kit_id: str, kits: MediaKitStore = Depends(media_kit_store)
) -> dict[str, bool]:
    kits.delete(influencer_id, media_kit_id)
    logger.info("media_kit_deleted", influencer_id=influencer_id, media_kit_id=media_kit_id)
    return {"success": True}
