"""Instagram profile lookups and the profile-photo proxy."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import Response

from influencer_crm.api.deps import get_service
from influencer_crm.instagram.apify import ApifyInstagramClient
from influencer_crm.instagram.lookup import (
    PHOTO_CACHE_CONTROL,
    InstagramProfile,
    RapidApiInstagramClient,
    fetch_photo,
)

router = APIRouter(prefix="/instagram", tags=["instagram"])


@router.get("")
async def lookup_profile(handle: str, request: Request) -> InstagramProfile:
    """Profile details from RapidAPI; 400 when rejected, 404 when unknown."""
    client: RapidApiInstagramClient = get_service(request, "rapidapi_client")
    return await client.lookup(handle)


@router.get("/apify")
async def lookup_profile_apify(handle: str, request: Request) -> InstagramProfile:
    client: ApifyInstagramClient = get_service(request, "apify_client")
    return await client.lookup_profile(handle)


@router.get("/photo")
async def proxy_photo(url: str, request: Request) -> Response:
    """Re-serve a remote profile photo, which Instagram's CDN will not hotlink."""
    http: httpx.AsyncClient = get_service(request, "http_client")
    content, content_type = await fetch_photo(http, url)
    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": PHOTO_CACHE_CONTROL},
    )
