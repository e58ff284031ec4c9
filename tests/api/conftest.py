"""Fixtures for HTTP route tests: a full app wired to the in-memory Supabase fake."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from influencer_crm.app import create_app
from influencer_crm.store.app_settings import AppSettingsStore
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.content import ContentStore
from influencer_crm.store.contracts import ContractStore
from influencer_crm.store.deals import DealStore
from influencer_crm.store.influencers import InfluencerStore
from influencer_crm.store.media_kits import MediaKitStore
from influencer_crm.store.orders import OrderStore


@pytest.fixture()
def services(fake_db, settings) -> dict[str, Any]:
    """Services dict with real stores and mocked outbound clients."""
    return {
        "_settings": settings,
        "supabase": fake_db,
        "influencer_store": InfluencerStore(fake_db),
        "campaign_store": CampaignStore(fake_db),
        "deal_store": DealStore(fake_db),
        "contract_store": ContractStore(fake_db),
        "order_store": OrderStore(fake_db),
        "content_store": ContentStore(fake_db),
        "media_kit_store": MediaKitStore(fake_db),
        "app_settings_store": AppSettingsStore(fake_db),
        "shopify_client": MagicMock(is_configured=True, aclose=AsyncMock()),
        "order_syncer": MagicMock(),
        "rapidapi_client": MagicMock(),
        "apify_client": MagicMock(),
        "http_client": MagicMock(aclose=AsyncMock()),
        "content_scraper": MagicMock(),
    }


@pytest.fixture()
def client(services) -> TestClient:
    return TestClient(create_app(services))


@pytest.fixture()
def cron_headers() -> dict[str, str]:
    return {"Authorization": "Bearer cron-secret"}
