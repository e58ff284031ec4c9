"""Apify actor runs for Instagram profiles and brand-tagged posts.

``apify-client`` is synchronous, so the async wrappers hand each actor run
to a worker thread.  Client and API failures surface as
``ExternalServiceError``.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from apify_client import ApifyClient
from apify_client.errors import ApifyClientError

from influencer_crm.domain.errors import (
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
)
from influencer_crm.domain.types import normalize_handle
from influencer_crm.instagram.lookup import InstagramProfile

logger = structlog.get_logger()

PROFILE_SCRAPER = "apify/instagram-profile-scraper"
TAGGED_SCRAPER = "apify/instagram-tagged-scraper"

TAGGED_RESULTS_LIMIT = 100


def _first_present(item: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return default


def profile_from_item(item: dict[str, Any]) -> InstagramProfile:
    """Map a profile-scraper dataset item onto :class:`InstagramProfile`.

    The actor has shipped several field naming conventions over time, so
    each field falls back through the known spellings.
    """
    username = str(_first_present(item, "username", "userName", default=""))
    return InstagramProfile(
        username=username,
        full_name=item.get("fullName") or item.get("full_name") or username,
        profile_pic_url=(
            item.get("profilePicUrl") or item.get("profile_pic_url") or item.get("profilePicUrlHd")
        ),
        follower_count=_first_present(
            item, "followersCount", "followers_count", "followedByCount", default=0
        ),
        following_count=_first_present(
            item, "followsCount", "following_count", "followCount", default=0
        ),
        media_count=_first_present(item, "postsCount", "media_count", "mediaCount", default=0),
        is_private=bool(_first_present(item, "private", "is_private", default=False)),
        is_verified=bool(_first_present(item, "verified", "is_verified", default=False)),
    )


class ApifyInstagramClient:
    """Run Instagram scrapers on Apify and read their datasets."""

    def __init__(self, api_token: str, client: ApifyClient | None = None) -> None:
        self._token = api_token
        self._client = client or (ApifyClient(api_token) if api_token else None)

    def _require_client(self) -> ApifyClient:
        if self._client is None:
            raise ConfigurationError("APIFY_API_TOKEN not configured")
        return self._client

    def _run_actor(self, actor_id: str, run_input: dict[str, Any]) -> list[dict[str, Any]]:
        client = self._require_client()
        logger.info("apify_actor_started", actor=actor_id)
        try:
            run = client.actor(actor_id).call(run_input=run_input)
            if run is None:
                return []
            items = list(client.dataset(run.default_dataset_id).iterate_items())
        except ApifyClientError as exc:
            logger.warning("apify_actor_failed", actor=actor_id, error=str(exc))
            raise ExternalServiceError(
                "Apify", f"{actor_id} run failed", getattr(exc, "status_code", None)
            ) from exc
        logger.info("apify_actor_finished", actor=actor_id, items=len(items))
        return items

    async def lookup_profile(self, handle: str) -> InstagramProfile:
        """Scrape one public profile.

        Raises:
            ConfigurationError: If no Apify token is configured.
            ExternalServiceError: If the actor run or dataset read fails.
            NotFoundError: If the scraper returns no items.
        """
        clean = normalize_handle(handle)
        items = await asyncio.to_thread(
            self._run_actor, PROFILE_SCRAPER, {"usernames": [clean], "resultsLimit": 1}
        )
        if not items:
            raise NotFoundError("instagram profile", clean)
        return profile_from_item(items[0])

    async def scrape_tagged_posts(
        self, brand_handle: str, limit: int = TAGGED_RESULTS_LIMIT
    ) -> list[dict[str, Any]]:
        """Return recent posts that tag *brand_handle*."""
        return await asyncio.to_thread(
            self._run_actor,
            TAGGED_SCRAPER,
            {"username": [normalize_handle(brand_handle)], "resultsLimit": limit},
        )
