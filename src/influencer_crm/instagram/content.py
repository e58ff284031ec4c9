"""Collect brand-tagged Instagram posts into the content library.

One run scrapes the posts tagging the brand account, keeps those owned by
known influencers, re-hosts their media in the ``influencer-content`` bucket
and records a ``content`` row per post.  Unknown owners, posts already
stored, posts without media and unique-key collisions are counted as
skipped; download or insert failures are collected as errors and do not
stop the run.
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from typing import Any

import httpx
import structlog
from postgrest.exceptions import APIError
from pydantic import BaseModel, Field

from influencer_crm.domain.models import ContentItem
from influencer_crm.domain.types import ContentType
from influencer_crm.instagram.apify import ApifyInstagramClient
from influencer_crm.observability.metrics import CONTENT_SAVED
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.client import UNIQUE_VIOLATION
from influencer_crm.store.content import CONTENT_BUCKET, ContentStore
from influencer_crm.store.influencers import InfluencerStore

logger = structlog.get_logger()


class ScrapeReport(BaseModel):
    """Counts from one tagged-content run."""

    total_processed: int = 0
    total_skipped: int = 0
    total_scraped: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def total_errors(self) -> int:
        return len(self.errors)

    @property
    def message(self) -> str:
        return (
            f"Scrape complete: {self.total_processed} new items, "
            f"{self.total_skipped} skipped"
        )

    def as_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "message": self.message,
            "total_processed": self.total_processed,
            "total_skipped": self.total_skipped,
            "total_errors": self.total_errors,
            "total_scraped": self.total_scraped,
        }
        if self.errors:
            body["errors"] = self.errors
        return body


def media_extension(content_type: str | None, url: str) -> str:
    """Pick a file extension from the response content type, then the URL."""
    content_type = content_type or ""
    if "video" in content_type:
        return "mp4"
    if "png" in content_type:
        return "png"
    if "webp" in content_type:
        return "webp"
    for ext in ("mp4", "png", "webp"):
        if f".{ext}" in url:
            return ext
    return "jpg"


def url_hash(url: str) -> str:
    """Short stable hash used to keep stored file names unique."""
    return hashlib.sha1(url.encode()).hexdigest()[:12]


def classify_post(post: dict[str, Any]) -> ContentType:
    """Reels are clips or videos; everything else is a feed post."""
    if post.get("productType") == "clips" or post.get("type") == "Video":
        return ContentType.REEL
    if post.get("videoUrl"):
        return ContentType.REEL
    return ContentType.POST


def source_media_url(post: dict[str, Any]) -> str | None:
    """Video first, then the display image, then the first carousel image."""
    images = post.get("images") or []
    return post.get("videoUrl") or post.get("displayUrl") or (images[0] if images else None)


class TaggedContentScraper:
    """Scrape brand-tagged posts and store them against influencers."""

    def __init__(
        self,
        apify: ApifyInstagramClient,
        influencers: InfluencerStore,
        campaigns: CampaignStore,
        content: ContentStore,
        http: httpx.AsyncClient,
        brand_handle: str,
    ) -> None:
        self._apify = apify
        self._influencers = influencers
        self._campaigns = campaigns
        self._content = content
        self._http = http
        self._brand_handle = brand_handle

    async def run(self) -> ScrapeReport:
        """Run one scrape and store every new post by a known influencer.

        Raises:
            ConfigurationError: If Apify is not configured.
            ExternalServiceError: If the Apify run fails.
        """
        handle_index = await asyncio.to_thread(self._influencers.handle_index)
        posts = await self._apify.scrape_tagged_posts(self._brand_handle)
        report = ScrapeReport(total_scraped=len(posts))

        for post in posts:
            try:
                await self._process(post, handle_index, report)
            except Exception as exc:
                logger.exception("tagged_post_processing_failed", url=post.get("url"))
                report.errors.append(f"Error processing post: {exc}")

        CONTENT_SAVED.inc(report.total_processed)
        logger.info(
            "tagged_content_scrape_complete",
            processed=report.total_processed,
            skipped=report.total_skipped,
            errors=report.total_errors,
            scraped=report.total_scraped,
        )
        return report

    async def _process(
        self, post: dict[str, Any], handle_index: dict[str, str], report: ScrapeReport
    ) -> None:
        handle = str(post.get("ownerUsername") or "").lower()
        influencer_id = handle_index.get(handle)
        original_url = post.get("url") or ""
        media_url = source_media_url(post)

        if not influencer_id or not original_url:
            report.total_skipped += 1
            return
        if await asyncio.to_thread(self._content.exists, original_url):
            report.total_skipped += 1
            return
        if not media_url:
            report.total_skipped += 1
            return

        stored_url = await self.download_and_store(media_url, handle)
        if stored_url is None:
            report.errors.append(f"Failed to download media for {handle}: {original_url}")
            return

        thumbnail_url = None
        if post.get("videoUrl") and post.get("displayUrl"):
            thumbnail_url = await self.download_and_store(post["displayUrl"], handle)

        campaign_id = await asyncio.to_thread(self._campaigns.first_campaign_id_for, influencer_id)
        item = ContentItem(
            influencer_id=influencer_id,
            campaign_id=campaign_id,
            type=classify_post(post),
            media_url=stored_url,
            original_url=original_url,
            thumbnail_url=thumbnail_url,
            caption=post.get("caption") or None,
            posted_at=post.get("timestamp"),
            metadata={
                "mentions": post.get("mentions") or [],
                "tagged_users": post.get("taggedUsers") or [],
                "likes_count": post.get("likesCount"),
                "comments_count": post.get("commentsCount"),
                "owner_full_name": post.get("ownerFullName"),
            },
        )

        try:
            await asyncio.to_thread(self._content.insert, item)
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                report.total_skipped += 1
                return
            report.errors.append(f"Insert error for {handle}: {exc.message}")
            return

        report.total_processed += 1

    async def download_and_store(self, media_url: str, handle: str) -> str | None:
        """Copy remote media into the content bucket, retrying the download once.

        Returns:
            The public URL of the stored file, or ``None`` if the download
            failed twice or the upload failed.
        """
        for attempt in (1, 2):
            try:
                response = await self._http.get(media_url)
            except httpx.HTTPError:
                logger.warning("media_download_failed", handle=handle, attempt=attempt)
                continue
            if response.is_success:
                break
            logger.warning(
                "media_download_failed",
                handle=handle,
                attempt=attempt,
                status_code=response.status_code,
            )
        else:
            return None

        content_type = response.headers.get("content-type")
        ext = media_extension(content_type, media_url)
        path = f"{handle}/{int(time.time() * 1000)}-{url_hash(media_url)}.{ext}"
        try:
            return await asyncio.to_thread(
                self._content.upload,
                CONTENT_BUCKET,
                path,
                response.content,
                content_type or "image/jpeg",
            )
        except Exception:
            logger.exception("media_upload_failed", handle=handle, path=path)
            return None
