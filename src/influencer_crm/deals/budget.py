"""Monthly paid-collaboration budget roll-up.

Each month is keyed ``YYYY-MM``.  Deals are attributed to the month their
campaign starts in; the committed figure is the sum of deal values and the
paid figure follows :func:`paid_amount`.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, computed_field

from influencer_crm.deals.calculator import paid_amount
from influencer_crm.domain.models import Campaign, CampaignDeal, MonthlyBudget

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Months before/after the current one that always appear in the roll-up
WINDOW_BEFORE = 1
WINDOW_AFTER = 3

# Committed share of budget at which a month is flagged
WARNING_THRESHOLD = Decimal("75")


class BudgetHealth(StrEnum):
    """How a month's committed spend compares with its budget."""

    NO_BUDGET = "no_budget"
    OK = "ok"
    WARNING = "warning"
    OVER = "over"


class MonthSummary(BaseModel):
    """Budget, committed and paid amounts for one month."""

    month_key: str
    label: str
    month: date
    budget: Decimal | None = None
    committed: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def health(self) -> BudgetHealth:
        if not self.budget:
            return BudgetHealth.NO_BUDGET
        percentage = self.committed / self.budget * 100
        if percentage > 100:
            return BudgetHealth.OVER
        if percentage >= WARNING_THRESHOLD:
            return BudgetHealth.WARNING
        return BudgetHealth.OK


def month_key(value: date) -> str:
    """``YYYY-MM`` for the month containing *value*."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(key: str) -> date:
    """Parse ``YYYY-MM`` into the first day of that month.

    Raises:
        ValueError: If *key* is not a valid ``YYYY-MM`` string.
    """
    year_str, sep, month_str = key.partition("-")
    if not sep or len(year_str) != 4 or len(month_str) != 2:
        raise ValueError(f"Invalid month key: {key!r}")
    return date(int(year_str), int(month_str), 1)


def month_label(value: date) -> str:
    """Human label such as ``"November 2025"``."""
    return f"{MONTH_NAMES[value.month - 1]} {value.year}"


def add_months(value: date, offset: int) -> date:
    """First day of the month *offset* months away from *value*."""
    index = value.year * 12 + (value.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def _summary_for(month_start: date) -> MonthSummary:
    return MonthSummary(
        month_key=month_key(month_start),
        label=month_label(month_start),
        month=month_start,
    )


def build_monthly_summaries(
    budgets: list[MonthlyBudget],
    campaigns: list[Campaign],
    deals: list[CampaignDeal],
    today: date,
) -> list[MonthSummary]:
    """Roll budgets and deal spend up by month.

    The result always covers last month through three months ahead, plus
    every month with a campaign start date or a stored budget.

    Args:
        budgets: Stored monthly budgets.
        campaigns: All campaigns; used for month membership and deal attribution.
        deals: All deals; attributed to their campaign's start month.
        today: The reference date for the rolling window.

    Returns:
        Month summaries sorted newest first.
    """
    current = date(today.year, today.month, 1)
    months: dict[str, MonthSummary] = {}
    for offset in range(-WINDOW_BEFORE, WINDOW_AFTER + 1):
        start = add_months(current, offset)
        months[month_key(start)] = _summary_for(start)

    campaign_months: dict[str, str] = {}
    for campaign in campaigns:
        if campaign.start_date is None:
            continue
        key = month_key(campaign.start_date)
        campaign_months[campaign.id] = key
        months.setdefault(key, _summary_for(campaign.start_date.replace(day=1)))

    for budget in budgets:
        key = month_key(budget.month)
        summary = months.setdefault(key, _summary_for(budget.month.replace(day=1)))
        months[key] = summary.model_copy(update={"budget": budget.budget_amount})

    for deal in deals:
        key = campaign_months.get(deal.campaign_id)
        if key is None:
            continue
        summary = months[key]
        months[key] = summary.model_copy(
            update={
                "committed": summary.committed + deal.total_deal_value,
                "paid": summary.paid + paid_amount(deal),
            }
        )

    return sorted(months.values(), key=lambda m: m.month_key, reverse=True)
