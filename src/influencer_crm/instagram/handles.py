"""Instagram handle and post-URL parsing."""

from __future__ import annotations

import re

from influencer_crm.domain.types import normalize_handle

_PROFILE_URL = re.compile(r"instagram\.com/([a-zA-Z0-9._]+)/?(?:\?|$)")
_POST_URL = re.compile(r"/(?:p|reel|reels)/([A-Za-z0-9_-]+)")


def is_post_url(value: str) -> bool:
    """True for links to a single post or reel rather than a profile."""
    return "/p/" in value or "/reel/" in value


def extract_handle(value: str | None) -> str | None:
    """Pull an Instagram handle out of a profile URL or a bare handle.

    Post and reel URLs name no account, so they yield ``None``.

    Examples:
        >>> extract_handle("https://www.instagram.com/Jane.Doe/?hl=en")
        'jane.doe'
        >>> extract_handle("@jane_doe ")
        'jane_doe'
        >>> extract_handle("https://www.instagram.com/p/Cx1abc/") is None
        True
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    if is_post_url(value):
        return None

    match = _PROFILE_URL.search(value)
    if match:
        return normalize_handle(match.group(1))

    if "/" not in value:
        return normalize_handle(value) or None

    return None


def extract_shortcode(url: str) -> str | None:
    """Return the shortcode of a ``/p/``, ``/reel/`` or ``/reels/`` URL."""
    match = _POST_URL.search(url)
    return match.group(1) if match else None


def clean_post_url(url: str) -> str:
    """First whitespace-separated token of *url*, without query string or trailing slash."""
    first = url.strip().split()[0] if url.strip() else ""
    return first.split("?", 1)[0].rstrip("/")
