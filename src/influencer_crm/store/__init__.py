"""Supabase-backed persistence: one store class per aggregate."""

from influencer_crm.store.app_settings import AppSettingsStore
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.client import create_supabase_client
from influencer_crm.store.content import ContentStore
from influencer_crm.store.contracts import ContractStore
from influencer_crm.store.deals import DealStore
from influencer_crm.store.influencers import InfluencerStore
from influencer_crm.store.media_kits import MediaKitStore
from influencer_crm.store.orders import OrderStore, TrackingRow

__all__ = [
    "AppSettingsStore",
    "CampaignStore",
    "ContentStore",
    "ContractStore",
    "DealStore",
    "InfluencerStore",
    "MediaKitStore",
    "OrderStore",
    "TrackingRow",
    "create_supabase_client",
]
