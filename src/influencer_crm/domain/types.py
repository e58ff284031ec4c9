"""Domain enumerations and status-label tables for the CRM."""

from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum


class PartnershipType(StrEnum):
    """Gifted vs. paid classification of an influencer relationship."""

    UNASSIGNED = "unassigned"
    GIFTED_NO_ASK = "gifted_no_ask"
    GIFTED_SOFT_ASK = "gifted_soft_ask"
    GIFTED_DELIVERABLE_ASK = "gifted_deliverable_ask"
    GIFTED_RECURRING = "gifted_recurring"
    PAID = "paid"


class Tier(StrEnum):
    """Influencer priority tier."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"


class RelationshipStatus(StrEnum):
    """Outreach pipeline stage for an influencer (globally or per campaign)."""

    PROSPECT = "prospect"
    CONTACTED = "contacted"
    FOLLOWED_UP = "followed_up"
    LEAD_DEAD = "lead_dead"
    CREATOR_WANTS_PAID = "creator_wants_paid"
    ORDER_PLACED = "order_placed"
    ORDER_DELIVERED = "order_delivered"
    ORDER_FOLLOW_UP_SENT = "order_follow_up_sent"
    ORDER_FOLLOW_UP_TWO_SENT = "order_follow_up_two_sent"
    POSTED = "posted"


class CampaignStatus(StrEnum):
    """Lifecycle of a campaign."""

    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ClothingSize(StrEnum):
    """Apparel sizes used for gifting orders."""

    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


class PaymentStatus(StrEnum):
    """Payment milestone reached on a paid deal."""

    NOT_PAID = "not_paid"
    DEPOSIT_PAID = "deposit_paid"
    PAID_ON_POST = "paid_on_post"
    PAID_IN_FULL = "paid_in_full"


class DeliverableType(StrEnum):
    """Kinds of deliverables a paid deal can contain."""

    UGC = "ugc"
    COLLAB_POST = "collab_post"
    ORGANIC_POST = "organic_post"
    WHITELISTING = "whitelisting"
    OTHER = "other"


class ContentPostedType(StrEnum):
    """What the influencer has published for a campaign."""

    NONE = "none"
    STORIES = "stories"
    IN_FEED_POST = "in_feed_post"
    REEL = "reel"
    TIKTOK = "tiktok"


class ApprovalStatus(StrEnum):
    """Internal approval state of a campaign membership."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class ShopifyOrderStatus(StrEnum):
    """Fulfillment progress of a gifting order as tracked in the CRM."""

    DRAFT = "draft"
    PLACED = "placed"
    FULFILLED = "fulfilled"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class ContractType(StrEnum):
    """Contract templates available for generation."""

    PAID_COLLAB = "paid_collab"
    WHITELISTING = "whitelisting"


class ContractStatus(StrEnum):
    """Lifecycle of a generated contract."""

    DRAFT = "draft"
    SENT = "sent"
    SIGNED = "signed"


class WhitelistingType(StrEnum):
    """Whether an influencer's ad-usage rights are paid for or gifted."""

    PAID = "paid"
    GIFTED = "gifted"


class WhitelistingStatus(StrEnum):
    """Where a deal's Meta ad-whitelisting run stands."""

    NOT_APPLICABLE = "not_applicable"
    PENDING = "pending"
    LIVE = "live"
    ENDED = "ended"


class ContentType(StrEnum):
    """Kinds of scraped Instagram content."""

    POST = "post"
    REEL = "reel"
    STORY = "story"


# Order statuses that still need polling against Shopify
IN_PROGRESS_ORDER_STATUSES: tuple[ShopifyOrderStatus, ...] = (
    ShopifyOrderStatus.DRAFT,
    ShopifyOrderStatus.FULFILLED,
    ShopifyOrderStatus.SHIPPED,
)

PARTNERSHIP_TYPE_LABELS: dict[PartnershipType, str] = {
    PartnershipType.UNASSIGNED: "Unassigned",
    PartnershipType.GIFTED_NO_ASK: "Gifted No Ask",
    PartnershipType.GIFTED_SOFT_ASK: "Gifted Soft Ask",
    PartnershipType.GIFTED_DELIVERABLE_ASK: "Gifted Deliverable Ask",
    PartnershipType.GIFTED_RECURRING: "Gifted Recurring",
    PartnershipType.PAID: "Paid",
}

RELATIONSHIP_STATUS_LABELS: dict[RelationshipStatus, str] = {
    RelationshipStatus.PROSPECT: "Prospect",
    RelationshipStatus.CONTACTED: "Contacted",
    RelationshipStatus.FOLLOWED_UP: "Followed Up",
    RelationshipStatus.LEAD_DEAD: "Lead Dead",
    RelationshipStatus.CREATOR_WANTS_PAID: "Creator Wants Paid",
    RelationshipStatus.ORDER_PLACED: "Order Placed",
    RelationshipStatus.ORDER_DELIVERED: "Order Delivered",
    RelationshipStatus.ORDER_FOLLOW_UP_SENT: "Follow Up Sent",
    RelationshipStatus.ORDER_FOLLOW_UP_TWO_SENT: "Follow Up 2 Sent",
    RelationshipStatus.POSTED: "Posted",
}

# Pipeline display order: the happy path first, dead ends last
RELATIONSHIP_STATUS_ORDER: list[RelationshipStatus] = [
    RelationshipStatus.PROSPECT,
    RelationshipStatus.CONTACTED,
    RelationshipStatus.FOLLOWED_UP,
    RelationshipStatus.ORDER_PLACED,
    RelationshipStatus.ORDER_DELIVERED,
    RelationshipStatus.ORDER_FOLLOW_UP_SENT,
    RelationshipStatus.ORDER_FOLLOW_UP_TWO_SENT,
    RelationshipStatus.POSTED,
    RelationshipStatus.CREATOR_WANTS_PAID,
    RelationshipStatus.LEAD_DEAD,
]

PAYMENT_STATUS_LABELS: dict[PaymentStatus, str] = {
    PaymentStatus.NOT_PAID: "Not Paid",
    PaymentStatus.DEPOSIT_PAID: "Deposit Paid",
    PaymentStatus.PAID_ON_POST: "Paid on Post",
    PaymentStatus.PAID_IN_FULL: "Paid in Full",
}

DELIVERABLE_TYPE_LABELS: dict[DeliverableType, str] = {
    DeliverableType.UGC: "UGC",
    DeliverableType.COLLAB_POST: "Collab Post",
    DeliverableType.ORGANIC_POST: "Organic Post",
    DeliverableType.WHITELISTING: "Whitelisting",
    DeliverableType.OTHER: "Other",
}

APPROVAL_STATUS_LABELS: dict[ApprovalStatus, str] = {
    ApprovalStatus.PENDING: "Pending Approval",
    ApprovalStatus.APPROVED: "Approved",
    ApprovalStatus.DECLINED: "Declined",
}

CONTRACT_TYPE_LABELS: dict[ContractType, str] = {
    ContractType.PAID_COLLAB: "Paid Collaboration",
    ContractType.WHITELISTING: "Whitelisting",
}

WHITELISTING_STATUS_LABELS: dict[WhitelistingStatus, str] = {
    WhitelistingStatus.NOT_APPLICABLE: "N/A",
    WhitelistingStatus.PENDING: "Pending",
    WhitelistingStatus.LIVE: "Live",
    WhitelistingStatus.ENDED: "Ended",
}


def get_status_label(status: RelationshipStatus) -> str:
    """Return the display label for a relationship status."""
    return RELATIONSHIP_STATUS_LABELS[status]


def format_currency(amount: Decimal | int | float) -> str:
    """Format an amount as whole US dollars, e.g. ``$1,500``.

    Args:
        amount: The amount to format.

    Returns:
        The formatted string, rounded half-up to the nearest dollar.
    """
    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,}"


def format_currency_detailed(amount: Decimal | int | float) -> str:
    """Format an amount as US dollars with cents, e.g. ``$1,500.00``."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def normalize_handle(handle: str) -> str:
    """Normalise an Instagram handle: strip ``@`` and whitespace, lower-case.

    Args:
        handle: A raw handle such as ``" @Jane.Doe "``.

    Returns:
        The canonical handle, e.g. ``"jane.doe"``.
    """
    return handle.replace("@", "").strip().lower()
