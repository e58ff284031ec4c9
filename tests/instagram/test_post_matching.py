"""Tests for resolving post URLs to Instagram handles."""

from __future__ import annotations

import csv

import httpx
import pytest

from influencer_crm.instagram.matching import (
    MATCH_COLUMNS,
    HandleMatch,
    PostReference,
    build_owner_index,
    match_post,
    resolve_handles,
    write_matches,
)

SCRAPER_ITEMS = [
    {"shortCode": "AAA", "url": "https://www.instagram.com/p/AAA/", "ownerUsername": "Jane"},
    {"inputUrl": "https://www.instagram.com/reel/BBB/?igsh=1", "ownerUsername": "sam.k"},
    {"shortCode": "CCC", "ownerUsername": ""},
]


class TestOwnerIndex:
    def test_indexes_shortcodes_and_urls(self) -> None:
        index = build_owner_index(SCRAPER_ITEMS)
        assert index["AAA"] == "jane"
        assert index["https://www.instagram.com/p/AAA"] == "jane"
        assert index["BBB"] == "sam.k"
        assert index["https://www.instagram.com/reel/BBB"] == "sam.k"
        assert "CCC" not in index

    def test_match_by_shortcode_then_url(self) -> None:
        index = build_owner_index(SCRAPER_ITEMS)
        assert match_post("https://instagram.com/p/AAA/?img_index=2", index) == "jane"
        assert match_post("https://www.instagram.com/reels/BBB", index) == "sam.k"
        assert match_post("https://www.instagram.com/p/ZZZ/", index) is None


class TestResolveHandles:
    @pytest.mark.anyio()
    async def test_index_hits_skip_oembed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("oEmbed should not be called")

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        matches = await resolve_handles(
            [PostReference(name="Jane", post_url="https://www.instagram.com/p/AAA/")],
            build_owner_index(SCRAPER_ITEMS),
            http=http,
        )
        assert matches[0].handle == "jane"
        assert matches[0].status == "found"

    @pytest.mark.anyio()
    async def test_falls_back_to_oembed(self) -> None:
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda r: httpx.Response(200, json={"author_name": "Other.Person"})
            )
        )
        matches = await resolve_handles(
            [PostReference(name="Other", post_url="https://www.instagram.com/p/ZZZ/")],
            {},
            http=http,
        )
        assert matches[0].handle == "other.person"

    @pytest.mark.anyio()
    async def test_without_client_unindexed_posts_not_found(self) -> None:
        matches = await resolve_handles(
            [PostReference(name="Other", post_url="https://www.instagram.com/p/ZZZ/")], {}
        )
        assert matches == [
            HandleMatch(name="Other", post_url="https://www.instagram.com/p/ZZZ/", handle=None)
        ]
        assert matches[0].status == "not_found"


class TestWriteMatches:
    def test_writes_csv(self, tmp_path) -> None:
        path = tmp_path / "handles.csv"
        write_matches(
            path,
            [
                HandleMatch(name="Jane", post_url="u1", handle="jane"),
                HandleMatch(name="Other", post_url="u2"),
            ],
        )

        with path.open(newline="", encoding="utf-8") as fh:
            reader = csv.DictReader(fh)
            assert reader.fieldnames == MATCH_COLUMNS
            rows = list(reader)

        assert rows == [
            {"name": "Jane", "post_url": "u1", "handle": "jane", "status": "found"},
            {"name": "Other", "post_url": "u2", "handle": "", "status": "not_found"},
        ]
