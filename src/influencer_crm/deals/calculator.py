"""Deal value arithmetic: totals, rate-card auto-fill and paid amounts.

All monetary calculations use Decimal arithmetic and are quantized to two
decimal places with ROUND_HALF_UP rounding.
"""

from decimal import ROUND_HALF_UP, Decimal

from influencer_crm.domain.models import CampaignDeal, DealDeliverable, InfluencerRates
from influencer_crm.domain.types import PaymentStatus

TWO_PLACES = Decimal("0.01")

# Payment statuses at which the whole deal value has been paid out
FULLY_PAID_STATUSES = frozenset({PaymentStatus.PAID_IN_FULL, PaymentStatus.PAID_ON_POST})


def calculate_total(deliverables: list[DealDeliverable]) -> Decimal:
    """Sum ``rate * quantity`` over every deliverable.

    Args:
        deliverables: Deal lines; quantity is at least 1 by model validation.

    Returns:
        The total deal value with exactly 2 decimal places.
    """
    total = sum((d.rate * d.quantity for d in deliverables), Decimal("0"))
    return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def apply_rate_card(
    deliverables: list[DealDeliverable],
    rates: InfluencerRates | None,
) -> list[DealDeliverable]:
    """Fill each deliverable's rate from the influencer's rate card.

    A deliverable entered without a rate (zero) takes the card rate for its
    type.  Explicit rates, and types without a card rate (including
    ``other``), are kept.

    Args:
        deliverables: The deal lines as entered.
        rates: The influencer's rate card, or ``None`` when they have none.

    Returns:
        A new list of deliverables with rates filled in.
    """
    if rates is None:
        return list(deliverables)

    filled: list[DealDeliverable] = []
    for deliverable in deliverables:
        card_rate = rates.rate_for(deliverable.type)
        if card_rate is not None and deliverable.rate == 0:
            deliverable = deliverable.model_copy(update={"rate": card_rate})
        filled.append(deliverable)
    return filled


def paid_amount(deal: CampaignDeal) -> Decimal:
    """Return how much of *deal* has been paid so far.

    The full value once paid in full or paid on post, the deposit once the
    deposit is paid, otherwise nothing.
    """
    if deal.payment_status in FULLY_PAID_STATUSES:
        return deal.total_deal_value
    if deal.payment_status == PaymentStatus.DEPOSIT_PAID:
        return deal.deposit_amount or Decimal("0")
    return Decimal("0")
