"""Resolve Instagram post URLs to the usernames that posted them.

Spreadsheets often carry a link to an influencer's post instead of their
profile.  Scraper exports (``shortCode``/``url``/``inputUrl`` plus
``ownerUsername``) are indexed first; anything not covered falls back to the
oEmbed endpoint.
"""

from __future__ import annotations

import asyncio
import csv
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import BaseModel

from influencer_crm.instagram.handles import clean_post_url, extract_shortcode
from influencer_crm.instagram.lookup import fetch_oembed_author

logger = structlog.get_logger()

MATCH_COLUMNS = ["name", "post_url", "handle", "status"]


class PostReference(BaseModel):
    """A spreadsheet row that names someone by post URL."""

    name: str
    post_url: str


class HandleMatch(BaseModel):
    """Outcome of resolving one post URL."""

    name: str
    post_url: str
    handle: str | None = None

    @property
    def status(self) -> str:
        return "found" if self.handle else "not_found"


def build_owner_index(items: Iterable[dict[str, Any]]) -> dict[str, str]:
    """Index scraper items by shortcode and cleaned URL.

    Items without ``ownerUsername`` are ignored.
    """
    index: dict[str, str] = {}
    for item in items:
        owner = str(item.get("ownerUsername") or "").strip().lower()
        if not owner:
            continue
        if item.get("shortCode"):
            index[str(item["shortCode"])] = owner
        for key in ("url", "inputUrl"):
            value = item.get(key)
            if not value:
                continue
            index[clean_post_url(str(value))] = owner
            shortcode = extract_shortcode(str(value))
            if shortcode:
                index.setdefault(shortcode, owner)
    return index


def match_post(post_url: str, index: dict[str, str]) -> str | None:
    """Look *post_url* up in an owner index by shortcode, then by URL."""
    shortcode = extract_shortcode(post_url)
    if shortcode and shortcode in index:
        return index[shortcode]
    return index.get(clean_post_url(post_url))


async def resolve_handles(
    posts: list[PostReference],
    index: dict[str, str],
    http: httpx.AsyncClient | None = None,
    delay: float = 0.0,
) -> list[HandleMatch]:
    """Resolve every post, using oEmbed for posts missing from *index*.

    Args:
        posts: Rows to resolve, in output order.
        index: Owner index from :func:`build_owner_index`; may be empty.
        http: Client for oEmbed lookups.  Without one, unindexed posts are
            reported as not found.
        delay: Seconds to wait between oEmbed requests.
    """
    matches: list[HandleMatch] = []
    for post in posts:
        handle = match_post(post.post_url, index)
        if handle is None and http is not None:
            handle = await fetch_oembed_author(http, post.post_url)
            if delay:
                await asyncio.sleep(delay)
        matches.append(HandleMatch(name=post.name, post_url=post.post_url, handle=handle))

    found = sum(1 for m in matches if m.handle)
    logger.info("post_handles_resolved", found=found, not_found=len(matches) - found)
    return matches


def write_matches(path: Path, matches: list[HandleMatch]) -> None:
    """Write *matches* as CSV with name, post_url, handle, status columns."""
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=MATCH_COLUMNS)
        writer.writeheader()
        for match in matches:
            writer.writerow(
                {
                    "name": match.name,
                    "post_url": match.post_url,
                    "handle": match.handle or "",
                    "status": match.status,
                }
            )
