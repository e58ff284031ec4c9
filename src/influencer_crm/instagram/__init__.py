"""Instagram profile lookups, post matching and tagged-content scraping."""

from influencer_crm.instagram.apify import ApifyInstagramClient, profile_from_item
from influencer_crm.instagram.content import ScrapeReport, TaggedContentScraper
from influencer_crm.instagram.handles import (
    clean_post_url,
    extract_handle,
    extract_shortcode,
    is_post_url,
)
from influencer_crm.instagram.lookup import (
    InstagramProfile,
    RapidApiInstagramClient,
    fetch_oembed_author,
    fetch_photo,
)
from influencer_crm.instagram.matching import (
    HandleMatch,
    PostReference,
    build_owner_index,
    match_post,
    resolve_handles,
    write_matches,
)

__all__ = [
    "ApifyInstagramClient",
    "HandleMatch",
    "InstagramProfile",
    "PostReference",
    "RapidApiInstagramClient",
    "ScrapeReport",
    "TaggedContentScraper",
    "build_owner_index",
    "clean_post_url",
    "extract_handle",
    "extract_shortcode",
    "fetch_oembed_author",
    "fetch_photo",
    "is_post_url",
    "match_post",
    "profile_from_item",
    "resolve_handles",
    "write_matches",
]
