"""Render stored contracts to HTML.

Stored ``variables`` are merged over the defaults for the contract type, so
a contract saved with a partial variable set still renders completely.
"""

from __future__ import annotations

from datetime import date
from html import escape
from typing import Any

from pydantic import BaseModel, ConfigDict

from influencer_crm.contracts import templates
from influencer_crm.domain.models import Contract, Influencer
from influencer_crm.domain.types import ContractType

_VARIABLES_CONFIG = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


def _without_nulls(variables: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in variables.items() if value is not None}


class PaidCollabVariables(BaseModel):
    """Fill-ins for the paid collaboration agreement."""

    model_config = _VARIABLES_CONFIG

    effective_date: str = ""
    talent_name: str = ""
    talent_representative: str = ""
    deliverables: str = "One (1) Collaborative Instagram carousel post featuring Nama products"
    total_fee: str = ""
    fee_additions: str = "+ 15% ASF + GST"
    total_amount_due: str = ""
    payment_1_percent: str = "50%"
    payment_1_amount: str = ""
    payment_1_condition: str = "due upon execution"
    payment_2_percent: str = "50%"
    payment_2_amount: str = ""
    payment_2_condition: str = "due once content is live"
    usage_rights_duration: str = "3 months from publication date"
    talent_signatory_name: str = ""


class WhitelistingVariables(BaseModel):
    """Fill-ins for the whitelisting agreement."""

    model_config = _VARIABLES_CONFIG

    effective_date: str = ""
    talent_name: str = ""
    talent_email: str = ""
    compensation: str = "$150 USD Nama gift card, delivered via email upon signing this Agreement."


def format_effective_date(day: date) -> str:
    """``date(2025, 3, 7)`` -> ``"March 7, 2025"``."""
    return f"{day:%B} {day.day}, {day.year}"


def default_variables(
    contract_type: ContractType, influencer: Influencer, today: date | None = None
) -> dict[str, Any]:
    """Starting variables for a new contract, seeded from the influencer."""
    effective_date = format_effective_date(today or date.today())
    if contract_type == ContractType.WHITELISTING:
        return WhitelistingVariables(
            effective_date=effective_date,
            talent_name=influencer.name,
            talent_email=influencer.email or "",
        ).model_dump()
    return PaidCollabVariables(
        effective_date=effective_date,
        talent_name=influencer.name,
        talent_signatory_name=influencer.name,
    ).model_dump()


def _brand_fields() -> dict[str, str]:
    return {
        "brand_name": escape(templates.BRAND_NAME),
        "brand_legal_name": escape(templates.BRAND_LEGAL_NAME),
        "brand_short_name": escape(templates.BRAND_SHORT_NAME),
        "brand_handle": escape(templates.BRAND_HANDLE),
        "brand_signatory": escape(templates.BRAND_SIGNATORY),
        "brand_signatory_title": escape(templates.BRAND_SIGNATORY_TITLE),
        "brand_email": escape(templates.BRAND_EMAIL),
        "signature_image": escape(templates.BRAND_SIGNATURE_IMAGE),
    }


def _escaped(model: BaseModel) -> dict[str, str]:
    return {key: escape(str(value)) for key, value in model.model_dump().items()}


def render_paid_collab(variables: dict[str, Any]) -> str:
    values = _escaped(PaidCollabVariables.model_validate(_without_nulls(variables)))
    representative = values["talent_representative"]
    additions = values["fee_additions"]
    return templates.PAID_COLLAB_TEMPLATE.substitute(
        values,
        **_brand_fields(),
        representative_html=f"<br>Represented by: {representative}" if representative else "",
        fee_additions_html=f" {additions}" if additions else "",
    )


def render_whitelisting(variables: dict[str, Any]) -> str:
    values = _escaped(WhitelistingVariables.model_validate(_without_nulls(variables)))
    return templates.WHITELISTING_TEMPLATE.substitute(values, **_brand_fields())


def render_contract_html(contract: Contract) -> str:
    """Render *contract* with its stored variables."""
    if contract.contract_type == ContractType.WHITELISTING:
        return render_whitelisting(contract.variables)
    return render_paid_collab(contract.variables)
