"""Tests for InfluencerStore and CampaignStore against the in-memory Supabase fake."""

from __future__ import annotations

from datetime import date

import pytest

from influencer_crm.domain.errors import DuplicateError, NotFoundError
from influencer_crm.domain.models import (
    CampaignCreate,
    CampaignMemberCreate,
    CampaignMemberUpdate,
    CampaignUpdate,
    InfluencerCreate,
    InfluencerUpdate,
)
from influencer_crm.domain.types import (
    ApprovalStatus,
    CampaignStatus,
    PartnershipType,
    RelationshipStatus,
    WhitelistingType,
)
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.client import rows
from influencer_crm.store.influencers import InfluencerStore


@pytest.fixture()
def influencers(fake_db):
    return InfluencerStore(fake_db)


@pytest.fixture()
def campaigns(fake_db):
    return CampaignStore(fake_db)


# ---------------------------------------------------------------------------
# Influencers
# ---------------------------------------------------------------------------


class TestInfluencerStore:
    def test_create_normalizes_handle_and_records_creator(self, influencers, fake_db) -> None:
        created = influencers.create(
            InfluencerCreate(name=" Jane Doe ", instagram_handle="@Jane.Doe"),
            created_by="user-1",
        )
        assert created.name == "Jane Doe"
        assert created.instagram_handle == "jane.doe"
        assert fake_db.tables["influencers"][0]["created_by"] == "user-1"

    def test_create_rejects_duplicate_handle(self, influencers) -> None:
        influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane_doe"))
        with pytest.raises(DuplicateError):
            influencers.create(InfluencerCreate(name="Other", instagram_handle="@JANE_DOE"))

    def test_find_by_handle_is_exact_despite_wildcards(self, influencers) -> None:
        influencers.create(InfluencerCreate(name="A", instagram_handle="janexdoe"))
        assert influencers.find_by_handle("jane_doe") is None
        assert influencers.find_by_handle("@JaneXDoe") is not None
        assert influencers.find_by_handle("  ") is None

    def test_list_filters_and_search(self, influencers) -> None:
        influencers.create(
            InfluencerCreate(
                name="Paid Person", instagram_handle="paid", partnership_type=PartnershipType.PAID
            )
        )
        influencers.create(
            InfluencerCreate(
                name="Gifted Person",
                instagram_handle="gifted",
                relationship_status=RelationshipStatus.CONTACTED,
            )
        )

        everyone = influencers.list_influencers()
        assert [i.instagram_handle for i in everyone] == ["gifted", "paid"]

        paid = influencers.list_influencers(partnership_type=PartnershipType.PAID)
        assert [i.instagram_handle for i in paid] == ["paid"]

        contacted = influencers.list_influencers(relationship_status=RelationshipStatus.CONTACTED)
        assert [i.instagram_handle for i in contacted] == ["gifted"]

        assert [i.name for i in influencers.list_influencers(search="GIFT")] == ["Gifted Person"]

    def test_list_filters_by_whitelisting(self, influencers) -> None:
        influencers.create(
            InfluencerCreate(
                name="Ads Person",
                instagram_handle="ads",
                whitelisting_enabled=True,
                whitelisting_type=WhitelistingType.PAID,
            )
        )
        influencers.create(
            InfluencerCreate(
                name="Gifted Ads",
                instagram_handle="giftedads",
                whitelisting_enabled=True,
                whitelisting_type=WhitelistingType.GIFTED,
            )
        )
        influencers.create(InfluencerCreate(name="No Ads", instagram_handle="noads"))

        enabled = influencers.list_influencers(whitelisting_enabled=True)
        assert [i.instagram_handle for i in enabled] == ["giftedads", "ads"]

        paid = influencers.list_influencers(
            whitelisting_enabled=True, whitelisting_type=WhitelistingType.PAID
        )
        assert [i.instagram_handle for i in paid] == ["ads"]

        off = influencers.list_influencers(whitelisting_enabled=False)
        assert [i.instagram_handle for i in off] == ["noads"]

    def test_get_missing_raises(self, influencers) -> None:
        with pytest.raises(NotFoundError, match="influencer 'nope' not found"):
            influencers.get("nope")

    def test_update_writes_only_set_fields(self, influencers) -> None:
        created = influencers.create(
            InfluencerCreate(name="Jane", instagram_handle="jane", email="j@example.com")
        )
        updated = influencers.update(created.id, InfluencerUpdate(notes="met at event"))
        assert updated.notes == "met at event"
        assert updated.email == "j@example.com"

    def test_update_stamps_updated_at(self, influencers, fake_db) -> None:
        created = influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane"))
        assert "updated_at" not in fake_db.tables["influencers"][0]

        updated = influencers.update(created.id, InfluencerUpdate(notes="follow up"))

        assert updated.updated_at
        assert fake_db.tables["influencers"][0]["updated_at"] == updated.updated_at

    def test_update_to_taken_handle_is_duplicate(self, influencers, fake_db) -> None:
        influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane"))
        sam = influencers.create(InfluencerCreate(name="Sam", instagram_handle="sam"))

        with pytest.raises(DuplicateError, match="influencer 'jane' already exists"):
            influencers.update(sam.id, InfluencerUpdate(instagram_handle="@JANE"))
        assert fake_db.tables["influencers"][1]["instagram_handle"] == "sam"

    def test_update_keeping_own_handle_is_allowed(self, influencers) -> None:
        jane = influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane"))
        updated = influencers.update(jane.id, InfluencerUpdate(instagram_handle="Jane", name="J"))
        assert updated.name == "J"

    def test_unique_violation_on_insert_is_duplicate(self, influencers, fake_db) -> None:
        fake_db.unique["influencers"] = ["instagram_handle"]
        fake_db.seed("influencers", {"id": "i1", "name": "Jane", "instagram_handle": "jane"})
        # Another writer inserted the row after the handle check ran
        influencers.find_by_handle = lambda handle: None  # type: ignore[method-assign]

        with pytest.raises(DuplicateError):
            influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane"))

    def test_unique_violation_on_update_is_duplicate(self, influencers, fake_db) -> None:
        fake_db.unique["influencers"] = ["instagram_handle"]
        fake_db.seed(
            "influencers",
            {"id": "i1", "name": "Jane", "instagram_handle": "jane"},
            {"id": "i2", "name": "Sam", "instagram_handle": "sam"},
        )
        influencers.find_by_handle = lambda handle: None  # type: ignore[method-assign]

        with pytest.raises(DuplicateError):
            influencers.update("i2", InfluencerUpdate(instagram_handle="jane"))

    def test_update_without_changes_returns_current(self, influencers) -> None:
        created = influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane"))
        assert influencers.update(created.id, InfluencerUpdate()).id == created.id

    def test_delete(self, influencers) -> None:
        created = influencers.create(InfluencerCreate(name="Jane", instagram_handle="jane"))
        influencers.delete(created.id)
        with pytest.raises(NotFoundError):
            influencers.delete(created.id)

    def test_handle_index_skips_blank_handles(self, influencers, fake_db) -> None:
        fake_db.seed(
            "influencers",
            {"id": "i1", "name": "A", "instagram_handle": "Alpha"},
            {"id": "i2", "name": "B", "instagram_handle": ""},
        )
        assert influencers.handle_index() == {"alpha": "i1"}


# ---------------------------------------------------------------------------
# Campaigns and memberships
# ---------------------------------------------------------------------------


class TestCampaignStore:
    def test_create_get_update_delete(self, campaigns) -> None:
        created = campaigns.create(CampaignCreate(name="Launch", start_date=date(2025, 11, 1)))
        assert campaigns.get(created.id).status is CampaignStatus.PLANNING

        updated = campaigns.update(created.id, CampaignUpdate(status=CampaignStatus.ACTIVE))
        assert updated.status is CampaignStatus.ACTIVE
        assert updated.updated_at is not None

        campaigns.delete(created.id)
        with pytest.raises(NotFoundError):
            campaigns.get(created.id)

    def test_list_for_month_bounds(self, campaigns) -> None:
        campaigns.create(CampaignCreate(name="Nov", start_date=date(2025, 11, 30)))
        campaigns.create(CampaignCreate(name="Dec", start_date=date(2025, 12, 1)))
        campaigns.create(CampaignCreate(name="Jan", start_date=date(2026, 1, 1)))

        assert [c.name for c in campaigns.list_for_month(date(2025, 11, 1))] == ["Nov"]
        assert [c.name for c in campaigns.list_for_month(date(2025, 12, 1))] == ["Dec"]

    def test_find_by_name(self, campaigns) -> None:
        campaigns.create(CampaignCreate(name="November 2025"))
        assert campaigns.find_by_name("November 2025") is not None
        assert campaigns.find_by_name("December 2025") is None

    def test_add_member_uses_default_partnership(self, campaigns) -> None:
        member = campaigns.add_member(
            "c1",
            CampaignMemberCreate(influencer_id="i1"),
            default_partnership_type=PartnershipType.GIFTED_SOFT_ASK,
        )
        assert member.partnership_type is PartnershipType.GIFTED_SOFT_ASK

        explicit = campaigns.add_member(
            "c1",
            CampaignMemberCreate(influencer_id="i2", partnership_type=PartnershipType.PAID),
            default_partnership_type=PartnershipType.GIFTED_SOFT_ASK,
        )
        assert explicit.partnership_type is PartnershipType.PAID

    def test_add_member_twice_is_duplicate(self, campaigns) -> None:
        campaigns.add_member("c1", CampaignMemberCreate(influencer_id="i1"))
        with pytest.raises(DuplicateError):
            campaigns.add_member("c1", CampaignMemberCreate(influencer_id="i1"))

    def test_approval_stamps_approved_at(self, campaigns) -> None:
        campaigns.add_member("c1", CampaignMemberCreate(influencer_id="i1"))
        member = campaigns.update_member(
            "c1", "i1", CampaignMemberUpdate(approval_status=ApprovalStatus.APPROVED)
        )
        assert member.approval_status is ApprovalStatus.APPROVED
        assert member.approved_at is not None

    def test_update_missing_member_raises(self, campaigns) -> None:
        with pytest.raises(NotFoundError):
            campaigns.update_member("c1", "ghost", CampaignMemberUpdate(notes="x"))
        with pytest.raises(NotFoundError):
            campaigns.update_member("c1", "ghost", CampaignMemberUpdate())

    def test_remove_member(self, campaigns, fake_db) -> None:
        campaigns.add_member("c1", CampaignMemberCreate(influencer_id="i1"))
        campaigns.remove_member("c1", "i1")
        assert rows(fake_db.table("campaign_influencers").select("*").execute()) == []
        with pytest.raises(NotFoundError):
            campaigns.remove_member("c1", "i1")

    def test_memberships_and_first_campaign(self, campaigns) -> None:
        assert campaigns.first_campaign_id_for("i1") is None
        campaigns.add_member("c1", CampaignMemberCreate(influencer_id="i1"))
        campaigns.add_member("c2", CampaignMemberCreate(influencer_id="i1"))
        assert campaigns.first_campaign_id_for("i1") == "c1"
        assert [m.campaign_id for m in campaigns.list_memberships_for("i1")] == ["c1", "c2"]
        assert len(campaigns.list_members("c1")) == 1
