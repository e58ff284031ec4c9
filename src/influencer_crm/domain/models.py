"""Pydantic v2 models for CRM records and request payloads.

Row models mirror the Supabase tables and ignore unknown columns so schema
additions do not break reads.  Monetary values are ``Decimal``; PostgREST
returns numeric columns as JSON numbers, so floats are routed through
``str`` before ``Decimal`` parsing to keep the displayed precision.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from influencer_crm.domain.types import (
    ApprovalStatus,
    CampaignStatus,
    ClothingSize,
    ContentPostedType,
    ContentType,
    ContractStatus,
    ContractType,
    DeliverableType,
    PartnershipType,
    PaymentStatus,
    RelationshipStatus,
    ShopifyOrderStatus,
    Tier,
    WhitelistingStatus,
    WhitelistingType,
    normalize_handle,
)

_ROW_CONFIG = ConfigDict(frozen=True, extra="ignore")


def _money_from_row(v: object) -> object:
    if isinstance(v, float):
        return str(v)
    return v


def _date_part(v: object) -> object:
    # Timestamp columns come back as "YYYY-MM-DDTHH:MM:SS+00:00"
    if isinstance(v, str) and "T" in v:
        return v.split("T", 1)[0]
    return v


# ---------------------------------------------------------------------------
# Influencers
# ---------------------------------------------------------------------------


class Influencer(BaseModel):
    """A content-creator record with contact info, terms and social metrics."""

    model_config = _ROW_CONFIG

    id: str
    name: str
    instagram_handle: str
    profile_photo_url: str | None = None
    follower_count: int = 0
    email: str | None = None
    phone: str | None = None
    mailing_address: str | None = None
    agent_name: str | None = None
    agent_email: str | None = None
    agent_phone: str | None = None
    partnership_type: PartnershipType = PartnershipType.UNASSIGNED
    tier: Tier = Tier.C
    relationship_status: RelationshipStatus = RelationshipStatus.PROSPECT
    top_size: ClothingSize | None = None
    bottoms_size: ClothingSize | None = None
    notes: str | None = None
    last_contacted_at: str | None = None
    created_by: str | None = None
    assigned_to: str | None = None
    shopify_customer_id: str | None = None
    shopify_order_id: str | None = None
    shopify_real_order_id: str | None = None
    shopify_order_status: ShopifyOrderStatus | None = None
    tracking_number: str | None = None
    whitelisting_enabled: bool = False
    whitelisting_type: WhitelistingType | None = None
    tracking_url: str | None = None
    order_status_updated_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("follower_count", mode="before")
    @classmethod
    def null_followers_are_zero(cls, v: object) -> object:
        """Treat a NULL follower count as zero."""
        return 0 if v is None else v

    @field_validator("whitelisting_enabled", mode="before")
    @classmethod
    def null_flag_is_false(cls, v: object) -> object:
        return False if v is None else v


class InfluencerCreate(BaseModel):
    """Payload for creating an influencer."""

    name: str
    instagram_handle: str
    profile_photo_url: str | None = None
    follower_count: int = 0
    email: str | None = None
    phone: str | None = None
    mailing_address: str | None = None
    agent_name: str | None = None
    agent_email: str | None = None
    agent_phone: str | None = None
    partnership_type: PartnershipType = PartnershipType.UNASSIGNED
    tier: Tier = Tier.C
    relationship_status: RelationshipStatus = RelationshipStatus.PROSPECT
    top_size: ClothingSize | None = None
    bottoms_size: ClothingSize | None = None
    notes: str | None = None
    assigned_to: str | None = None
    shopify_customer_id: str | None = None
    whitelisting_enabled: bool = False
    whitelisting_type: WhitelistingType | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Ensure influencer name is not empty or whitespace-only."""
        if not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()

    @field_validator("instagram_handle")
    @classmethod
    def handle_is_normalized(cls, v: str) -> str:
        """Store handles without ``@``, trimmed and lower-cased."""
        handle = normalize_handle(v)
        if not handle:
            raise ValueError("instagram_handle must not be empty")
        return handle


class InfluencerUpdate(BaseModel):
    """Partial update for an influencer; only set fields are written."""

    name: str | None = None
    instagram_handle: str | None = None
    profile_photo_url: str | None = None
    follower_count: int | None = None
    email: str | None = None
    phone: str | None = None
    mailing_address: str | None = None
    agent_name: str | None = None
    agent_email: str | None = None
    agent_phone: str | None = None
    partnership_type: PartnershipType | None = None
    tier: Tier | None = None
    relationship_status: RelationshipStatus | None = None
    top_size: ClothingSize | None = None
    bottoms_size: ClothingSize | None = None
    notes: str | None = None
    last_contacted_at: str | None = None
    assigned_to: str | None = None
    shopify_customer_id: str | None = None
    whitelisting_enabled: bool | None = None
    whitelisting_type: WhitelistingType | None = None

    @field_validator("instagram_handle")
    @classmethod
    def handle_is_normalized(cls, v: str | None) -> str | None:
        """Normalise the handle when one is supplied."""
        return normalize_handle(v) if v is not None else None


class InfluencerRates(BaseModel):
    """Rate card for an influencer, one optional rate per deliverable type."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    influencer_id: str
    ugc_rate: Decimal | None = None
    collab_post_rate: Decimal | None = None
    organic_post_rate: Decimal | None = None
    whitelisting_rate: Decimal | None = None
    notes: str | None = None

    @field_validator(
        "ugc_rate", "collab_post_rate", "organic_post_rate", "whitelisting_rate", mode="before"
    )
    @classmethod
    def coerce_row_float(cls, v: object) -> object:
        """Convert float rates from PostgREST to string before Decimal parsing."""
        return _money_from_row(v)

    def rate_for(self, deliverable_type: DeliverableType) -> Decimal | None:
        """Return the configured rate for *deliverable_type*, if any."""
        rates: dict[DeliverableType, Decimal | None] = {
            DeliverableType.UGC: self.ugc_rate,
            DeliverableType.COLLAB_POST: self.collab_post_rate,
            DeliverableType.ORGANIC_POST: self.organic_post_rate,
            DeliverableType.WHITELISTING: self.whitelisting_rate,
        }
        return rates.get(deliverable_type)


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------


class Campaign(BaseModel):
    """A time-boxed marketing effort grouping influencers."""

    model_config = _ROW_CONFIG

    id: str
    name: str
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: CampaignStatus = CampaignStatus.PLANNING
    collection_deck_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def strip_time(cls, v: object) -> object:
        """Accept timestamp strings by keeping only the date part."""
        return _date_part(v)

    @property
    def month_key(self) -> str | None:
        """``YYYY-MM`` of the campaign start, used for monthly roll-ups."""
        if self.start_date is None:
            return None
        return f"{self.start_date.year:04d}-{self.start_date.month:02d}"


class CampaignCreate(BaseModel):
    """Payload for creating a campaign."""

    name: str
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: CampaignStatus = CampaignStatus.PLANNING
    collection_deck_url: str | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Ensure campaign name is not empty or whitespace-only."""
        if not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()


class CampaignUpdate(BaseModel):
    """Partial update for a campaign."""

    name: str | None = None
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: CampaignStatus | None = None
    collection_deck_url: str | None = None


class ProductSelection(BaseModel):
    """A product variant picked for a gifting order."""

    sku: str
    variant_id: str
    quantity: int = 1
    title: str | None = None
    price: str | None = None


class CampaignInfluencer(BaseModel):
    """Membership of an influencer in a campaign with per-campaign tracking."""

    model_config = _ROW_CONFIG

    id: str
    campaign_id: str
    influencer_id: str
    compensation: str | None = None
    notes: str | None = None
    added_at: str | None = None
    status: RelationshipStatus = RelationshipStatus.PROSPECT
    partnership_type: PartnershipType = PartnershipType.UNASSIGNED
    shopify_order_id: str | None = None
    shopify_real_order_id: str | None = None
    shopify_order_status: ShopifyOrderStatus | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    order_status_updated_at: str | None = None
    product_selections: list[ProductSelection] | None = None
    content_posted: ContentPostedType = ContentPostedType.NONE
    approval_status: ApprovalStatus | None = None
    approval_note: str | None = None
    approved_at: str | None = None
    approved_by: str | None = None


class CampaignMemberCreate(BaseModel):
    """Payload for adding an influencer to a campaign.

    ``partnership_type`` defaults to the influencer's own classification when
    omitted.
    """

    influencer_id: str
    compensation: str | None = None
    notes: str | None = None
    status: RelationshipStatus = RelationshipStatus.PROSPECT
    partnership_type: PartnershipType | None = None
    product_selections: list[ProductSelection] | None = None


class CampaignMemberUpdate(BaseModel):
    """Partial update for a campaign membership."""

    compensation: str | None = None
    notes: str | None = None
    status: RelationshipStatus | None = None
    partnership_type: PartnershipType | None = None
    shopify_order_id: str | None = None
    shopify_order_status: ShopifyOrderStatus | None = None
    product_selections: list[ProductSelection] | None = None
    content_posted: ContentPostedType | None = None
    approval_status: ApprovalStatus | None = None
    approval_note: str | None = None
    approved_by: str | None = None


# ---------------------------------------------------------------------------
# Deals and budgets
# ---------------------------------------------------------------------------


class DealDeliverable(BaseModel):
    """One line of a paid deal: a deliverable type at a rate, times quantity."""

    type: DeliverableType = DeliverableType.UGC
    rate: Decimal = Decimal("0")
    quantity: int = 1
    description: str | None = None

    @field_validator("rate", mode="before")
    @classmethod
    def coerce_rate(cls, v: object) -> object:
        """Convert float rates to string before Decimal parsing; NULL is zero."""
        if v is None:
            return Decimal("0")
        return _money_from_row(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_defaults_to_one(cls, v: object) -> object:
        """A missing or zero quantity counts as one."""
        return v or 1

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        """Ensure quantity is at least 1."""
        if v < 1:
            raise ValueError("quantity must be at least 1")
        return v


class CampaignDeal(BaseModel):
    """Commercial terms of a paid collaboration within a campaign."""

    model_config = _ROW_CONFIG

    id: str
    campaign_id: str
    influencer_id: str
    deliverables: list[DealDeliverable] = Field(default_factory=list)
    total_deal_value: Decimal = Decimal("0")
    payment_status: PaymentStatus = PaymentStatus.NOT_PAID
    deposit_amount: Decimal | None = None
    deposit_paid_date: date | None = None
    final_paid_date: date | None = None
    whitelisting_status: WhitelistingStatus = WhitelistingStatus.NOT_APPLICABLE
    whitelisting_live_date: date | None = None
    whitelisting_expiry_date: date | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("total_deal_value", "deposit_amount", mode="before")
    @classmethod
    def coerce_row_float(cls, v: object) -> object:
        """Convert float amounts from PostgREST to string before Decimal parsing."""
        return _money_from_row(v)

    @field_validator(
        "deposit_paid_date",
        "final_paid_date",
        "whitelisting_live_date",
        "whitelisting_expiry_date",
        mode="before",
    )
    @classmethod
    def strip_time(cls, v: object) -> object:
        """Accept timestamp strings by keeping only the date part."""
        return _date_part(v)

    @field_validator("whitelisting_status", mode="before")
    @classmethod
    def null_status_not_applicable(cls, v: object) -> object:
        return WhitelistingStatus.NOT_APPLICABLE if v is None else v

    @field_validator("deliverables", mode="before")
    @classmethod
    def null_deliverables_are_empty(cls, v: object) -> object:
        """Treat a NULL deliverables column as an empty list."""
        return [] if v is None else v


class DealWrite(BaseModel):
    """Payload for creating or replacing a deal.

    ``total_deal_value`` is not accepted from clients; it is recomputed from
    the deliverables on every write.
    """

    campaign_id: str
    influencer_id: str
    deliverables: list[DealDeliverable] = Field(default_factory=list)
    payment_status: PaymentStatus = PaymentStatus.NOT_PAID
    deposit_amount: Decimal | None = None
    deposit_paid_date: date | None = None
    final_paid_date: date | None = None
    whitelisting_status: WhitelistingStatus = WhitelistingStatus.NOT_APPLICABLE
    whitelisting_live_date: date | None = None
    whitelisting_expiry_date: date | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def expiry_not_before_live(self) -> DealWrite:
        """Reject a whitelisting window that ends before it starts."""
        live, expiry = self.whitelisting_live_date, self.whitelisting_expiry_date
        if live is not None and expiry is not None and expiry < live:
            raise ValueError("whitelisting_expiry_date must not be before whitelisting_live_date")
        return self


class RatesWrite(BaseModel):
    """Payload for replacing an influencer's rate card."""

    ugc_rate: Decimal | None = None
    collab_post_rate: Decimal | None = None
    organic_post_rate: Decimal | None = None
    whitelisting_rate: Decimal | None = None
    notes: str | None = None


class MonthlyBudget(BaseModel):
    """Paid-collaboration budget for one calendar month."""

    model_config = _ROW_CONFIG

    id: str | None = None
    month: date
    budget_amount: Decimal

    @field_validator("month", mode="before")
    @classmethod
    def strip_time(cls, v: object) -> object:
        """Accept timestamp strings by keeping only the date part."""
        return _date_part(v)

    @field_validator("budget_amount", mode="before")
    @classmethod
    def coerce_row_float(cls, v: object) -> object:
        """Convert float amounts from PostgREST to string before Decimal parsing."""
        return _money_from_row(v)


class BudgetWrite(BaseModel):
    """Payload for setting a month's budget."""

    budget_amount: Decimal

    @field_validator("budget_amount")
    @classmethod
    def must_not_be_negative(cls, v: Decimal) -> Decimal:
        """Budgets are never negative."""
        if v < 0:
            raise ValueError("budget_amount must not be negative")
        return v


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderLineItem(BaseModel):
    """A line item of a synced Shopify order."""

    product_name: str
    variant_title: str | None = None
    sku: str = ""
    quantity: int = 1


class InfluencerOrder(BaseModel):
    """Shopify order history row for an influencer."""

    model_config = _ROW_CONFIG

    id: str | None = None
    influencer_id: str
    shopify_order_id: str
    shopify_customer_id: str
    order_number: str
    order_date: str
    total_amount: Decimal = Decimal("0")
    is_gift: bool = False
    line_items: list[OrderLineItem] = Field(default_factory=list)
    created_at: str | None = None
    synced_at: str | None = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def coerce_row_float(cls, v: object) -> object:
        """Convert float amounts from PostgREST to string before Decimal parsing."""
        return _money_from_row(v)


class OrderSyncRequest(BaseModel):
    """Payload for syncing an influencer's Shopify order history."""

    shopify_customer_id: str | None = None


# ---------------------------------------------------------------------------
# Contracts and content
# ---------------------------------------------------------------------------


class Contract(BaseModel):
    """A generated contract and the variables it was rendered from."""

    model_config = _ROW_CONFIG

    id: str
    influencer_id: str
    contract_type: ContractType
    variables: dict[str, Any] = Field(default_factory=dict)
    status: ContractStatus = ContractStatus.DRAFT
    signed_pdf_url: str | None = None
    created_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ContractCreate(BaseModel):
    """Payload for creating a contract."""

    influencer_id: str
    contract_type: ContractType
    variables: dict[str, Any]
    status: ContractStatus = ContractStatus.DRAFT
    created_by: str | None = None


class ContractUpdate(BaseModel):
    """Partial update for a contract."""

    contract_type: ContractType | None = None
    variables: dict[str, Any] | None = None
    status: ContractStatus | None = None


class InfluencerMediaKit(BaseModel):
    """A media-kit file uploaded for an influencer."""

    model_config = _ROW_CONFIG

    id: str
    influencer_id: str
    file_url: str
    file_name: str
    file_size: int | None = None
    uploaded_at: str | None = None


class ContentItem(BaseModel):
    """A piece of scraped Instagram content attributed to an influencer."""

    model_config = _ROW_CONFIG

    id: str | None = None
    influencer_id: str
    campaign_id: str | None = None
    type: ContentType
    media_url: str
    original_url: str
    thumbnail_url: str | None = None
    caption: str | None = None
    posted_at: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
