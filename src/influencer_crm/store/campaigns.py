"""Campaign and campaign-membership table access."""

from __future__ import annotations

from datetime import date
from typing import Any

from supabase import Client

from influencer_crm.domain.errors import DuplicateError, NotFoundError
from influencer_crm.domain.models import (
    Campaign,
    CampaignCreate,
    CampaignInfluencer,
    CampaignMemberCreate,
    CampaignMemberUpdate,
    CampaignUpdate,
)
from influencer_crm.domain.types import CampaignStatus, PartnershipType
from influencer_crm.store.client import rows, utc_now_iso

CAMPAIGNS = "campaigns"
MEMBERS = "campaign_influencers"


class CampaignStore:
    """Read and write ``campaigns`` and ``campaign_influencers`` rows."""

    def __init__(self, client: Client) -> None:
        self._client = client

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def list_campaigns(self, status: CampaignStatus | None = None) -> list[Campaign]:
        """List campaigns ordered by start date, most recent first."""
        query = self._client.table(CAMPAIGNS).select("*")
        if status is not None:
            query = query.eq("status", str(status))
        response = query.order("start_date", desc=True).execute()
        return [Campaign.model_validate(r) for r in rows(response)]

    def list_for_month(self, month_start: date) -> list[Campaign]:
        """List campaigns whose start date falls in the month beginning *month_start*."""
        if month_start.month == 12:
            next_month = date(month_start.year + 1, 1, 1)
        else:
            next_month = date(month_start.year, month_start.month + 1, 1)
        response = (
            self._client.table(CAMPAIGNS)
            .select("*")
            .gte("start_date", month_start.isoformat())
            .lt("start_date", next_month.isoformat())
            .order("start_date")
            .execute()
        )
        return [Campaign.model_validate(r) for r in rows(response)]

    def get(self, campaign_id: str) -> Campaign:
        """Fetch one campaign.

        Raises:
            NotFoundError: If no row has *campaign_id*.
        """
        data = rows(self._client.table(CAMPAIGNS).select("*").eq("id", campaign_id).execute())
        if not data:
            raise NotFoundError("campaign", campaign_id)
        return Campaign.model_validate(data[0])

    def find_by_name(self, name: str) -> Campaign | None:
        data = rows(self._client.table(CAMPAIGNS).select("*").eq("name", name).limit(1).execute())
        return Campaign.model_validate(data[0]) if data else None

    def create(self, payload: CampaignCreate, created_by: str | None = None) -> Campaign:
        record: dict[str, Any] = payload.model_dump(mode="json")
        if created_by is not None:
            record["created_by"] = created_by
        data = rows(self._client.table(CAMPAIGNS).insert(record).execute())
        return Campaign.model_validate(data[0])

    def update(self, campaign_id: str, payload: CampaignUpdate) -> Campaign:
        changes = payload.model_dump(mode="json", exclude_unset=True)
        if not changes:
            return self.get(campaign_id)
        changes["updated_at"] = utc_now_iso()
        data = rows(self._client.table(CAMPAIGNS).update(changes).eq("id", campaign_id).execute())
        if not data:
            raise NotFoundError("campaign", campaign_id)
        return Campaign.model_validate(data[0])

    def delete(self, campaign_id: str) -> None:
        data = rows(self._client.table(CAMPAIGNS).delete().eq("id", campaign_id).execute())
        if not data:
            raise NotFoundError("campaign", campaign_id)

    # ------------------------------------------------------------------
    # Memberships
    # ------------------------------------------------------------------

    def list_members(self, campaign_id: str) -> list[CampaignInfluencer]:
        """List the influencers of a campaign in the order they were added."""
        response = (
            self._client.table(MEMBERS)
            .select("*")
            .eq("campaign_id", campaign_id)
            .order("added_at")
            .execute()
        )
        return [CampaignInfluencer.model_validate(r) for r in rows(response)]

    def list_memberships_for(self, influencer_id: str) -> list[CampaignInfluencer]:
        """List every campaign membership held by one influencer."""
        response = (
            self._client.table(MEMBERS)
            .select("*")
            .eq("influencer_id", influencer_id)
            .order("added_at")
            .execute()
        )
        return [CampaignInfluencer.model_validate(r) for r in rows(response)]

    def get_member(self, campaign_id: str, influencer_id: str) -> CampaignInfluencer | None:
        data = rows(
            self._client.table(MEMBERS)
            .select("*")
            .eq("campaign_id", campaign_id)
            .eq("influencer_id", influencer_id)
            .execute()
        )
        return CampaignInfluencer.model_validate(data[0]) if data else None

    def add_member(
        self,
        campaign_id: str,
        payload: CampaignMemberCreate,
        default_partnership_type: PartnershipType = PartnershipType.UNASSIGNED,
    ) -> CampaignInfluencer:
        """Add an influencer to a campaign.

        Args:
            campaign_id: The campaign to join.
            payload: Membership fields.
            default_partnership_type: Used when the payload leaves
                ``partnership_type`` unset, normally the influencer's own type.

        Raises:
            DuplicateError: If the influencer is already in the campaign.
        """
        if self.get_member(campaign_id, payload.influencer_id) is not None:
            raise DuplicateError("campaign membership", f"{campaign_id}/{payload.influencer_id}")

        record = payload.model_dump(mode="json", exclude_none=True)
        record["campaign_id"] = campaign_id
        record["partnership_type"] = str(payload.partnership_type or default_partnership_type)
        data = rows(self._client.table(MEMBERS).insert(record).execute())
        return CampaignInfluencer.model_validate(data[0])

    def update_member(
        self,
        campaign_id: str,
        influencer_id: str,
        payload: CampaignMemberUpdate,
    ) -> CampaignInfluencer:
        """Apply a partial membership update.

        Setting ``approval_status`` stamps ``approved_at`` with the current time.
        """
        changes = payload.model_dump(mode="json", exclude_unset=True)
        if "approval_status" in changes:
            changes["approved_at"] = utc_now_iso()
        if not changes:
            member = self.get_member(campaign_id, influencer_id)
            if member is None:
                raise NotFoundError("campaign membership", f"{campaign_id}/{influencer_id}")
            return member

        data = rows(
            self._client.table(MEMBERS)
            .update(changes)
            .eq("campaign_id", campaign_id)
            .eq("influencer_id", influencer_id)
            .execute()
        )
        if not data:
            raise NotFoundError("campaign membership", f"{campaign_id}/{influencer_id}")
        return CampaignInfluencer.model_validate(data[0])

    def remove_member(self, campaign_id: str, influencer_id: str) -> None:
        data = rows(
            self._client.table(MEMBERS)
            .delete()
            .eq("campaign_id", campaign_id)
            .eq("influencer_id", influencer_id)
            .execute()
        )
        if not data:
            raise NotFoundError("campaign membership", f"{campaign_id}/{influencer_id}")

    def first_campaign_id_for(self, influencer_id: str) -> str | None:
        """Return the id of the first campaign an influencer belongs to, if any."""
        data = rows(
            self._client.table(MEMBERS)
            .select("campaign_id")
            .eq("influencer_id", influencer_id)
            .limit(1)
            .execute()
        )
        return str(data[0]["campaign_id"]) if data else None
