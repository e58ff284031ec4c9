"""Contract variable defaults and HTML rendering."""

from influencer_crm.contracts.render import (
    PaidCollabVariables,
    WhitelistingVariables,
    default_variables,
    format_effective_date,
    render_contract_html,
    render_paid_collab,
    render_whitelisting,
)

__all__ = [
    "PaidCollabVariables",
    "WhitelistingVariables",
    "default_variables",
    "format_effective_date",
    "render_contract_html",
    "render_paid_collab",
    "render_whitelisting",
]
