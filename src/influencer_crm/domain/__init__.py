"""Domain types, models, and errors for the influencer CRM."""

from influencer_crm.domain.errors import (
    ConfigurationError,
    CRMError,
    DuplicateError,
    ExternalServiceError,
    LookupRejectedError,
    NotFoundError,
)
from influencer_crm.domain.models import (
    Campaign,
    CampaignDeal,
    CampaignInfluencer,
    ContentItem,
    Contract,
    DealDeliverable,
    Influencer,
    InfluencerMediaKit,
    InfluencerOrder,
    InfluencerRates,
    MonthlyBudget,
)
from influencer_crm.domain.types import (
    ContractType,
    DeliverableType,
    PartnershipType,
    PaymentStatus,
    RelationshipStatus,
    ShopifyOrderStatus,
    WhitelistingStatus,
    WhitelistingType,
    format_currency,
    normalize_handle,
)

__all__ = [
    "CRMError",
    "Campaign",
    "CampaignDeal",
    "CampaignInfluencer",
    "ConfigurationError",
    "ContentItem",
    "Contract",
    "ContractType",
    "DealDeliverable",
    "DeliverableType",
    "DuplicateError",
    "ExternalServiceError",
    "Influencer",
    "InfluencerMediaKit",
    "InfluencerOrder",
    "InfluencerRates",
    "LookupRejectedError",
    "MonthlyBudget",
    "NotFoundError",
    "PartnershipType",
    "PaymentStatus",
    "RelationshipStatus",
    "ShopifyOrderStatus",
    "WhitelistingStatus",
    "WhitelistingType",
    "format_currency",
    "normalize_handle",
]
