"""Instagram profile lookups over HTTP: RapidAPI, image proxy and oEmbed.

The RapidAPI "instagram-scraper-stable-api" hover endpoint returns a
``user_data`` object; the HD profile picture is preferred over the standard
one.  Apify-based lookups live in :mod:`influencer_crm.instagram.apify`.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel

from influencer_crm.domain.errors import (
    ConfigurationError,
    ExternalServiceError,
    LookupRejectedError,
    NotFoundError,
)
from influencer_crm.domain.types import normalize_handle
from influencer_crm.instagram.handles import clean_post_url
from influencer_crm.resilience.retry import resilient_api_call

logger = structlog.get_logger()

RAPIDAPI_HOST = "instagram-scraper-stable-api.p.rapidapi.com"
PROFILE_HOVER_URL = f"https://{RAPIDAPI_HOST}/ig_get_fb_profile_hover.php"
OEMBED_URL = "https://api.instagram.com/oembed/"

# Instagram's CDN and oEmbed endpoint reject requests without a browser UA
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)

PHOTO_CACHE_CONTROL = "public, max-age=3600"


class InstagramProfile(BaseModel):
    """Public profile fields used to create and enrich influencers."""

    username: str
    full_name: str | None = None
    profile_pic_url: str | None = None
    follower_count: int = 0
    following_count: int = 0
    media_count: int = 0
    is_private: bool = False
    is_verified: bool = False


class RapidApiInstagramClient:
    """Profile lookups against the RapidAPI Instagram scraper."""

    def __init__(self, api_key: str, http: httpx.AsyncClient | None = None) -> None:
        self._api_key = api_key
        self._http = http or httpx.AsyncClient(timeout=30.0)

    async def aclose(self) -> None:
        await self._http.aclose()

    @resilient_api_call("rapidapi")
    async def _fetch_hover(self, handle: str) -> httpx.Response:
        response = await self._http.get(
            PROFILE_HOVER_URL,
            params={"username_or_url": handle},
            headers={"x-rapidapi-key": self._api_key, "x-rapidapi-host": RAPIDAPI_HOST},
        )
        response.raise_for_status()
        return response

    async def lookup(self, handle: str) -> InstagramProfile:
        """Look up a public profile by handle.

        Args:
            handle: Handle with or without ``@``.

        Returns:
            The profile.

        Raises:
            ConfigurationError: If no RapidAPI key is configured.
            ExternalServiceError: If the API answers with an HTTP error or
                cannot be reached.
            LookupRejectedError: If the API answers with an ``error`` payload.
            NotFoundError: If the response carries no ``user_data``.
        """
        if not self._api_key:
            raise ConfigurationError("RAPIDAPI_KEY not configured")

        clean = normalize_handle(handle)
        try:
            response = await self._fetch_hover(clean)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "instagram_lookup_http_error",
                handle=clean,
                status_code=exc.response.status_code,
            )
            raise ExternalServiceError(
                "RapidAPI", "Failed to fetch Instagram profile", exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("instagram_lookup_unreachable", handle=clean, error=str(exc))
            raise ExternalServiceError("RapidAPI", "Failed to fetch Instagram profile") from exc

        data: dict[str, Any] = response.json()
        if data.get("error"):
            raise LookupRejectedError(str(data["error"]))

        user = data.get("user_data")
        if not user:
            raise NotFoundError("instagram profile", clean)

        hd_info = user.get("hd_profile_pic_url_info") or {}
        return InstagramProfile(
            username=user.get("username") or clean,
            full_name=user.get("full_name"),
            profile_pic_url=hd_info.get("url") or user.get("profile_pic_url"),
            follower_count=user.get("follower_count") or 0,
            following_count=user.get("following_count") or 0,
            media_count=user.get("media_count") or 0,
            is_private=bool(user.get("is_private")),
            is_verified=bool(user.get("is_verified")),
        )


async def fetch_photo(http: httpx.AsyncClient, url: str) -> tuple[bytes, str]:
    """Download an image, returning its bytes and content type.

    Raises:
        ExternalServiceError: If the image host fails or answers with an HTTP error.
    """
    try:
        response = await http.get(url, headers={"User-Agent": BROWSER_USER_AGENT})
    except httpx.HTTPError as exc:
        raise ExternalServiceError("image host", "Failed to fetch image") from exc
    if response.is_error:
        raise ExternalServiceError(
            "image host", "Failed to fetch image", response.status_code
        )
    return response.content, response.headers.get("content-type", "image/jpeg")


async def fetch_oembed_author(http: httpx.AsyncClient, post_url: str) -> str | None:
    """Resolve a post URL to its author's username via Instagram oEmbed.

    Returns ``None`` on any HTTP failure; the caller records the post as
    not found.
    """
    try:
        response = await http.get(
            OEMBED_URL,
            params={"url": clean_post_url(post_url)},
            headers={"User-Agent": BROWSER_USER_AGENT},
        )
    except httpx.HTTPError:
        logger.warning("oembed_request_failed", post_url=post_url, exc_info=True)
        return None

    if response.is_error:
        return None
    author = response.json().get("author_name")
    return normalize_handle(str(author)) if author else None
