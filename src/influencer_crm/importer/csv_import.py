"""Spreadsheet import of influencers and their campaign memberships.

Rows carry a name, an Instagram profile link or handle, contact details, a
partnership label and a comma-separated list of month codes (``NOV25``).
Each new handle is enriched from the profile lookup, inserted as a tier-C
prospect and linked to the campaign for every month code on the row.
Handles that already exist are skipped, so re-running an import is safe.
"""

from __future__ import annotations

import asyncio
import csv
import re
import time
from datetime import date
from pathlib import Path
from typing import Any

import httpx
import structlog
import yaml  # type: ignore[import-untyped]
from postgrest.exceptions import APIError
from pydantic import BaseModel, Field

from influencer_crm.deals.budget import MONTH_NAMES
from influencer_crm.domain.errors import CRMError, DuplicateError
from influencer_crm.domain.models import (
    CampaignCreate,
    CampaignMemberCreate,
    InfluencerCreate,
)
from influencer_crm.domain.types import (
    CampaignStatus,
    PartnershipType,
    RelationshipStatus,
    Tier,
)
from influencer_crm.instagram.handles import extract_handle, is_post_url
from influencer_crm.instagram.lookup import InstagramProfile, RapidApiInstagramClient, fetch_photo
from influencer_crm.instagram.matching import PostReference
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.content import PROFILE_PHOTO_BUCKET, ContentStore
from influencer_crm.store.influencers import InfluencerStore

logger = structlog.get_logger()

_DEFAULT_CONFIG_PATH = Path("config/import_fields.yaml")

_CAMPAIGN_CODE = re.compile(r"^([A-Z]{3})(\d{2})$")
_MONTH_ABBREVIATIONS = {name[:3].upper(): index for index, name in enumerate(MONTH_NAMES, 1)}


class ImportConfig(BaseModel):
    """Column mapping and partnership label table for one spreadsheet layout."""

    field_mapping: dict[str, list[str]]
    partnership_types: dict[str, PartnershipType] = Field(default_factory=dict)
    import_note: str | None = None


class ImportReport(BaseModel):
    """What an import run did."""

    created: int = 0
    skipped: int = 0
    linked: int = 0
    errors: list[str] = Field(default_factory=list)


def load_import_config(config_path: Path | None = None) -> ImportConfig:
    """Load the spreadsheet column mapping.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    path = config_path or _DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Import fields config not found: {path}")

    with path.open() as f:
        config = yaml.safe_load(f) or {}

    return ImportConfig.model_validate(config)


def normalize_header(header: str) -> str:
    return header.replace("\ufeff", "").strip()


def read_rows(path: Path) -> list[dict[str, str]]:
    """Read a CSV into dicts keyed by cleaned headers, dropping blank rows."""
    with path.open(newline="", encoding="utf-8-sig") as fh:
        reader = csv.reader(fh)
        try:
            headers = [normalize_header(h) for h in next(reader)]
        except StopIteration:
            return []
        result: list[dict[str, str]] = []
        for values in reader:
            if not any(v.strip() for v in values):
                continue
            padded = values + [""] * (len(headers) - len(values))
            result.append({h: v.strip() for h, v in zip(headers, padded, strict=False)})
    return result


def row_value(row: dict[str, str], columns: list[str]) -> str:
    """First non-empty value among *columns*."""
    for column in columns:
        value = (row.get(column) or "").strip()
        if value:
            return value
    return ""


def map_partnership_type(label: str, mapping: dict[str, PartnershipType]) -> PartnershipType:
    """Translate a spreadsheet label; unknown labels become ``unassigned``."""
    return mapping.get(label.strip().lower(), PartnershipType.UNASSIGNED)


def parse_campaign_code(code: str) -> tuple[str, date] | None:
    """Turn ``NOV25`` into ``("November 2025", date(2025, 11, 1))``.

    Codes that are not a month abbreviation plus a two-digit year
    (``FW25``, ``Import Test``) return ``None``.
    """
    match = _CAMPAIGN_CODE.match(code.strip())
    if not match:
        return None
    month = _MONTH_ABBREVIATIONS.get(match.group(1))
    if month is None:
        return None
    year = 2000 + int(match.group(2))
    return f"{MONTH_NAMES[month - 1]} {year}", date(year, month, 1)


def read_post_references(rows: list[dict[str, str]], config: ImportConfig) -> list[PostReference]:
    """Rows whose Instagram column holds a post link, one per name."""
    seen: set[str] = set()
    references: list[PostReference] = []
    for row in rows:
        name = row_value(row, config.field_mapping.get("name", []))
        value = row_value(row, config.field_mapping.get("instagram", []))
        if not name or not is_post_url(value) or name.lower() in seen:
            continue
        seen.add(name.lower())
        references.append(PostReference(name=name, post_url=value.split()[0]))
    return references


class CsvImporter:
    """Create influencers and campaign memberships from spreadsheet rows."""

    def __init__(
        self,
        influencers: InfluencerStore,
        campaigns: CampaignStore,
        content: ContentStore,
        config: ImportConfig,
        lookup: RapidApiInstagramClient | None = None,
        http: httpx.AsyncClient | None = None,
        delay: float = 1.0,
        dry_run: bool = False,
    ) -> None:
        self._influencers = influencers
        self._campaigns = campaigns
        self._content = content
        self._config = config
        self._lookup = lookup
        self._http = http
        self._delay = delay
        self._dry_run = dry_run
        self._campaign_ids: dict[str, str] = {}

    def _column(self, row: dict[str, str], field: str) -> str:
        return row_value(row, self._config.field_mapping.get(field, []))

    async def run(self, rows: list[dict[str, str]]) -> ImportReport:
        report = ImportReport()
        for number, row in enumerate(rows, 1):
            try:
                await self._import_row(row, report)
            except (CRMError, APIError, httpx.HTTPError) as exc:
                name = self._column(row, "name")
                logger.warning("import_row_failed", row=number, name=name, error=str(exc))
                report.errors.append(f"Row {number} ({name}): {exc}")

        logger.info(
            "csv_import_complete",
            created=report.created,
            skipped=report.skipped,
            linked=report.linked,
            errors=len(report.errors),
            dry_run=self._dry_run,
        )
        return report

    async def _import_row(self, row: dict[str, str], report: ImportReport) -> None:
        csv_name = self._column(row, "name")
        handle = extract_handle(self._column(row, "instagram"))
        if not handle:
            logger.info("import_row_skipped", name=csv_name, reason="no_handle")
            report.skipped += 1
            return

        existing = await asyncio.to_thread(self._influencers.find_by_handle, handle)
        if existing is not None:
            logger.info("import_row_skipped", handle=handle, reason="exists")
            report.skipped += 1
            return

        partnership_type = map_partnership_type(
            self._column(row, "partnership_type"), self._config.partnership_types
        )
        codes = [c.strip() for c in self._column(row, "campaigns").split(",") if c.strip()]

        if self._dry_run:
            logger.info("import_row_planned", handle=handle, partnership_type=partnership_type)
            report.created += 1
            report.linked += sum(1 for c in codes if parse_campaign_code(c))
            return

        profile = await self._fetch_profile(handle)
        photo_url = None
        if profile is not None and profile.profile_pic_url:
            photo_url = await self._rehost_photo(profile.profile_pic_url, handle)

        payload = InfluencerCreate(
            name=(profile.full_name if profile and profile.full_name else csv_name) or handle,
            instagram_handle=handle,
            profile_photo_url=photo_url,
            follower_count=profile.follower_count if profile else 0,
            email=self._column(row, "email") or None,
            mailing_address=self._column(row, "mailing_address") or None,
            partnership_type=partnership_type,
            tier=Tier.C,
            relationship_status=RelationshipStatus.PROSPECT,
            notes=self._config.import_note,
        )
        influencer = await asyncio.to_thread(self._influencers.create, payload)
        report.created += 1
        logger.info("influencer_imported", handle=handle, influencer_id=influencer.id)

        for code in codes:
            campaign_id = await self._campaign_for_code(code)
            if campaign_id is None:
                continue
            member = CampaignMemberCreate(
                influencer_id=influencer.id,
                partnership_type=partnership_type,
                status=RelationshipStatus.PROSPECT,
            )
            try:
                await asyncio.to_thread(self._campaigns.add_member, campaign_id, member)
            except DuplicateError:
                continue
            report.linked += 1

    async def _fetch_profile(self, handle: str) -> InstagramProfile | None:
        if self._lookup is None:
            return None
        try:
            return await self._lookup.lookup(handle)
        except (CRMError, httpx.HTTPError) as exc:
            logger.info("import_profile_lookup_failed", handle=handle, error=str(exc))
            return None
        finally:
            if self._delay:
                await asyncio.sleep(self._delay)

    async def _rehost_photo(self, photo_url: str, handle: str) -> str | None:
        if self._http is None:
            return None
        try:
            data, _ = await fetch_photo(self._http, photo_url)
        except (CRMError, httpx.HTTPError) as exc:
            logger.info("import_photo_download_failed", handle=handle, error=str(exc))
            return None

        path = f"{handle}-{int(time.time() * 1000)}.jpg"
        try:
            return await asyncio.to_thread(
                self._content.upload, PROFILE_PHOTO_BUCKET, path, data, "image/jpeg"
            )
        except Exception as exc:
            logger.info("import_photo_upload_failed", handle=handle, error=str(exc))
            return None

    async def _campaign_for_code(self, code: str) -> str | None:
        parsed = parse_campaign_code(code)
        if parsed is None:
            logger.info("campaign_code_skipped", code=code)
            return None
        name, start_date = parsed
        if name in self._campaign_ids:
            return self._campaign_ids[name]

        campaign = await asyncio.to_thread(self._campaigns.find_by_name, name)
        if campaign is None:
            payload = CampaignCreate(
                name=name, start_date=start_date, status=CampaignStatus.ACTIVE
            )
            campaign = await asyncio.to_thread(self._campaigns.create, payload)
            logger.info("campaign_created", name=name, campaign_id=campaign.id)

        self._campaign_ids[name] = campaign.id
        return campaign.id


def summarize(report: ImportReport) -> dict[str, Any]:
    return {
        "created": report.created,
        "skipped": report.skipped,
        "linked": report.linked,
        "errors": len(report.errors),
    }
