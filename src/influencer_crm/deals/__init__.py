"""Deal totals, rate-card auto-fill, budget roll-ups and whitelisting windows."""

from influencer_crm.deals.budget import (
    BudgetHealth,
    MonthSummary,
    build_monthly_summaries,
    month_key,
    month_label,
    parse_month_key,
)
from influencer_crm.deals.calculator import apply_rate_card, calculate_total, paid_amount
from influencer_crm.deals.whitelisting import (
    UsageState,
    WhitelistingOverview,
    WhitelistingUsage,
    build_overview,
    effective_expiry,
    usage_for,
)

__all__ = [
    "BudgetHealth",
    "MonthSummary",
    "UsageState",
    "WhitelistingOverview",
    "WhitelistingUsage",
    "apply_rate_card",
    "build_monthly_summaries",
    "build_overview",
    "calculate_total",
    "effective_expiry",
    "month_key",
    "month_label",
    "paid_amount",
    "parse_month_key",
    "usage_for",
]
