"""Usage windows for Meta ad whitelisting on paid deals.

A deal's whitelisting run starts on ``whitelisting_live_date`` and ends on
``whitelisting_expiry_date``; without an explicit expiry the usage rights
lapse 90 days after going live.  Windows within a week of lapsing are
flagged so they can be renewed or taken down.
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import StrEnum

from pydantic import BaseModel

from influencer_crm.domain.models import CampaignDeal, Influencer
from influencer_crm.domain.types import WhitelistingStatus, WhitelistingType

DEFAULT_USAGE_TERM = timedelta(days=90)
EXPIRY_WARNING_DAYS = 7


class UsageState(StrEnum):
    """Where a deal's usage window stands on a given day."""

    NOT_LIVE = "not_live"
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"
    ENDED = "ended"


class WhitelistingUsage(BaseModel):
    """One deal's whitelisting window as seen on a given day."""

    deal_id: str
    campaign_id: str
    status: WhitelistingStatus
    live_date: date | None = None
    expires_on: date | None = None
    days_remaining: int | None = None
    state: UsageState


class WhitelistingOverview(BaseModel):
    """An influencer's whitelisting setup and every deal that ran ads."""

    influencer_id: str
    whitelisting_enabled: bool
    whitelisting_type: WhitelistingType | None = None
    headline: UsageState | None = None
    deals: list[WhitelistingUsage]


def effective_expiry(deal: CampaignDeal) -> date | None:
    """The day usage rights lapse, defaulting to 90 days after going live."""
    if deal.whitelisting_expiry_date is not None:
        return deal.whitelisting_expiry_date
    if deal.whitelisting_live_date is not None:
        return deal.whitelisting_live_date + DEFAULT_USAGE_TERM
    return None


def usage_for(deal: CampaignDeal, today: date) -> WhitelistingUsage:
    """Classify *deal*'s usage window on *today*.

    Ended runs stay ended whatever their dates.  Otherwise a window with no
    days left is expired and one with a week or less is expiring, even when
    the status was never moved to live.
    """
    expires_on = effective_expiry(deal)
    remaining = (expires_on - today).days if expires_on is not None else None

    if deal.whitelisting_status is WhitelistingStatus.ENDED:
        state = UsageState.ENDED
    elif remaining is None:
        state = UsageState.NOT_LIVE
    elif remaining <= 0:
        state = UsageState.EXPIRED
    elif remaining <= EXPIRY_WARNING_DAYS:
        state = UsageState.EXPIRING
    elif deal.whitelisting_status is WhitelistingStatus.LIVE:
        state = UsageState.ACTIVE
    else:
        state = UsageState.NOT_LIVE

    return WhitelistingUsage(
        deal_id=deal.id,
        campaign_id=deal.campaign_id,
        status=deal.whitelisting_status,
        live_date=deal.whitelisting_live_date,
        expires_on=expires_on,
        days_remaining=remaining,
        state=state,
    )


_URGENCY = (UsageState.EXPIRED, UsageState.EXPIRING, UsageState.ACTIVE, UsageState.ENDED)


def most_urgent(usages: list[WhitelistingUsage]) -> UsageState | None:
    """The state that most needs attention, or ``None`` when nothing has run."""
    states = {u.state for u in usages}
    for state in _URGENCY:
        if state in states:
            return state
    return None


def build_overview(
    influencer: Influencer, deals: list[CampaignDeal], today: date
) -> WhitelistingOverview:
    """Summarize *influencer*'s whitelisting deals, soonest expiry first."""
    relevant = [d for d in deals if d.whitelisting_status is not WhitelistingStatus.NOT_APPLICABLE]
    usages = sorted(
        (usage_for(d, today) for d in relevant),
        key=lambda u: (u.expires_on is None, u.expires_on or date.max),
    )
    return WhitelistingOverview(
        influencer_id=influencer.id,
        whitelisting_enabled=influencer.whitelisting_enabled,
        whitelisting_type=influencer.whitelisting_type,
        headline=most_urgent(usages),
        deals=usages,
    )
