"""Tests for DealStore, ContractStore, ContentStore and AppSettingsStore."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from postgrest.exceptions import APIError

from influencer_crm.domain.errors import NotFoundError
from influencer_crm.domain.models import (
    ContentItem,
    ContractCreate,
    ContractUpdate,
    DealDeliverable,
    DealWrite,
    RatesWrite,
)
from influencer_crm.domain.types import (
    ContentType,
    ContractStatus,
    ContractType,
    DeliverableType,
    PaymentStatus,
    WhitelistingStatus,
)
from influencer_crm.store.app_settings import AppSettingsStore
from influencer_crm.store.client import UNIQUE_VIOLATION
from influencer_crm.store.content import CONTENT_BUCKET, ContentStore
from influencer_crm.store.contracts import SIGNED_BUCKET, ContractStore
from influencer_crm.store.deals import DealStore


def _deal_write(campaign_id: str = "c1", influencer_id: str = "i1") -> DealWrite:
    return DealWrite(
        campaign_id=campaign_id,
        influencer_id=influencer_id,
        deliverables=[DealDeliverable(type=DeliverableType.UGC, rate=Decimal("250"), quantity=2)],
    )


# ---------------------------------------------------------------------------
# Deals, rate cards and budgets
# ---------------------------------------------------------------------------


class TestDealStore:
    def test_create_stores_total(self, fake_db) -> None:
        store = DealStore(fake_db)
        deal = store.create_deal(_deal_write(), Decimal("500.00"))
        assert deal.total_deal_value == Decimal("500.00")
        assert deal.deliverables[0].quantity == 2
        assert fake_db.tables["campaign_deals"][0]["total_deal_value"] == "500.00"

    def test_list_filters_by_campaign(self, fake_db) -> None:
        store = DealStore(fake_db)
        store.create_deal(_deal_write("c1"), Decimal("1"))
        store.create_deal(_deal_write("c2"), Decimal("2"))
        assert [d.campaign_id for d in store.list_deals()] == ["c1", "c2"]
        assert [d.campaign_id for d in store.list_deals(campaign_id="c2")] == ["c2"]

    def test_list_filters_by_influencer(self, fake_db) -> None:
        store = DealStore(fake_db)
        store.create_deal(_deal_write("c1", "i1"), Decimal("1"))
        store.create_deal(_deal_write("c1", "i2"), Decimal("2"))
        store.create_deal(_deal_write("c2", "i1"), Decimal("3"))

        mine = store.list_deals(influencer_id="i1")
        assert [d.campaign_id for d in mine] == ["c1", "c2"]
        both = store.list_deals(campaign_id="c1", influencer_id="i2")
        assert [d.influencer_id for d in both] == ["i2"]

    def test_whitelisting_window_round_trips(self, fake_db) -> None:
        store = DealStore(fake_db)
        payload = _deal_write().model_copy(
            update={
                "whitelisting_status": WhitelistingStatus.LIVE,
                "whitelisting_live_date": date(2025, 11, 1),
                "whitelisting_expiry_date": date(2026, 1, 30),
            }
        )

        deal = store.get_deal(store.create_deal(payload, Decimal("500")).id)

        assert deal.whitelisting_status is WhitelistingStatus.LIVE
        assert deal.whitelisting_expiry_date == date(2026, 1, 30)
        assert fake_db.tables["campaign_deals"][0]["whitelisting_status"] == "live"

    def test_update_and_delete(self, fake_db) -> None:
        store = DealStore(fake_db)
        deal = store.create_deal(_deal_write(), Decimal("500.00"))
        payload = _deal_write().model_copy(update={"payment_status": PaymentStatus.PAID_IN_FULL})

        updated = store.update_deal(deal.id, payload, Decimal("500.00"))
        assert updated.payment_status is PaymentStatus.PAID_IN_FULL

        store.delete_deal(deal.id)
        with pytest.raises(NotFoundError):
            store.get_deal(deal.id)
        with pytest.raises(NotFoundError):
            store.update_deal(deal.id, payload, Decimal("1"))

    def test_rate_card_upsert_replaces(self, fake_db) -> None:
        store = DealStore(fake_db)
        assert store.get_rates("i1") is None

        store.upsert_rates("i1", RatesWrite(ugc_rate=Decimal("100")))
        store.upsert_rates("i1", RatesWrite(ugc_rate=Decimal("150"), notes="raised"))

        rates = store.get_rates("i1")
        assert rates is not None
        assert rates.ugc_rate == Decimal("150")
        assert rates.notes == "raised"
        assert len(fake_db.tables["influencer_rates"]) == 1

    def test_set_budget_upserts_by_month(self, fake_db) -> None:
        store = DealStore(fake_db)
        store.set_budget(date(2025, 11, 1), Decimal("1000"))
        store.set_budget(date(2025, 11, 1), Decimal("2500"))
        store.set_budget(date(2025, 12, 1), Decimal("500"))

        budgets = store.list_budgets()
        assert [(b.month, b.budget_amount) for b in budgets] == [
            (date(2025, 12, 1), Decimal("500")),
            (date(2025, 11, 1), Decimal("2500")),
        ]


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class TestContractStore:
    def test_crud(self, fake_db) -> None:
        store = ContractStore(fake_db)
        contract = store.create(
            ContractCreate(
                influencer_id="i1",
                contract_type=ContractType.PAID_COLLAB,
                variables={"influencer_name": "Jane"},
            )
        )
        assert contract.status is ContractStatus.DRAFT
        assert [r["id"] for r in fake_db.tables["influencer_contracts"]] == [contract.id]
        assert "contracts" not in fake_db.tables
        assert [c.id for c in store.list_contracts(influencer_id="i1")] == [contract.id]
        assert store.list_contracts(influencer_id="i2") == []

        signed = store.update(contract.id, ContractUpdate(status=ContractStatus.SIGNED))
        assert signed.status is ContractStatus.SIGNED
        assert signed.variables == {"influencer_name": "Jane"}

        store.delete(contract.id)
        with pytest.raises(NotFoundError, match="contract"):
            store.get(contract.id)

    def test_attach_signed_pdf(self, fake_db) -> None:
        store = ContractStore(fake_db)
        contract = store.create(
            ContractCreate(
                influencer_id="i1", contract_type=ContractType.WHITELISTING, variables={}
            )
        )

        signed = store.attach_signed_pdf(contract.id, b"%PDF-1.7")

        assert signed.status is ContractStatus.SIGNED
        assert signed.updated_at is not None
        [(bucket, path)] = fake_db.uploads
        assert bucket == SIGNED_BUCKET
        assert path.startswith(f"contracts/i1/{contract.id}_signed_")
        assert path.endswith(".pdf")
        assert fake_db.uploads[(bucket, path)] == (
            b"%PDF-1.7",
            {"content-type": "application/pdf", "upsert": "false"},
        )
        assert signed.signed_pdf_url == f"https://storage.test/contracts/{path}"

    def test_attach_signed_pdf_to_missing_contract(self, fake_db) -> None:
        with pytest.raises(NotFoundError, match="contract"):
            ContractStore(fake_db).attach_signed_pdf("ghost", b"%PDF")
        assert fake_db.uploads == {}


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


class TestContentStore:
    def _item(self, url: str = "https://www.instagram.com/p/ABC/") -> ContentItem:
        return ContentItem(
            influencer_id="i1",
            type=ContentType.POST,
            media_url="https://storage.test/x.jpg",
            original_url=url,
        )

    def test_insert_and_exists(self, fake_db) -> None:
        store = ContentStore(fake_db)
        assert store.exists("https://www.instagram.com/p/ABC/") is False
        saved = store.insert(self._item())
        assert saved.id is not None
        assert store.exists("https://www.instagram.com/p/ABC/") is True

    def test_duplicate_original_url_raises_unique_violation(self, fake_db) -> None:
        store = ContentStore(fake_db)
        store.insert(self._item())
        with pytest.raises(APIError) as excinfo:
            store.insert(self._item())
        assert excinfo.value.code == UNIQUE_VIOLATION

    def test_upload_returns_public_url(self, fake_db) -> None:
        store = ContentStore(fake_db)
        url = store.upload(CONTENT_BUCKET, "jane/1-abc.jpg", b"bytes", "image/jpeg")
        assert url == f"https://storage.test/{CONTENT_BUCKET}/jane/1-abc.jpg"
        data, options = fake_db.uploads[(CONTENT_BUCKET, "jane/1-abc.jpg")]
        assert data == b"bytes"
        assert options["content-type"] == "image/jpeg"


# ---------------------------------------------------------------------------
# App settings
# ---------------------------------------------------------------------------


class TestAppSettingsStore:
    def test_get_missing_and_set(self, fake_db) -> None:
        store = AppSettingsStore(fake_db)
        assert store.get("shopify_access_token") is None
        store.set("shopify_access_token", "shpat_one")
        store.set("shopify_access_token", "shpat_two")
        assert store.get("shopify_access_token") == "shpat_two"
        assert len(fake_db.tables["app_settings"]) == 1
