"""Scraped content table and media storage buckets."""

from __future__ import annotations

from supabase import Client

from influencer_crm.domain.models import ContentItem
from influencer_crm.store.client import rows

TABLE = "content"
CONTENT_BUCKET = "influencer-content"
PROFILE_PHOTO_BUCKET = "profile-photos"


class ContentStore:
    """Read and write ``content`` rows and upload media to Supabase Storage."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def exists(self, original_url: str) -> bool:
        """True when a content row already points at *original_url*."""
        response = (
            self._client.table(TABLE)
            .select("id")
            .eq("original_url", original_url)
            .limit(1)
            .execute()
        )
        return bool(rows(response))

    def insert(self, item: ContentItem) -> ContentItem:
        """Insert a content row.

        Raises:
            postgrest.exceptions.APIError: On database errors, including a
                unique violation (code ``23505``) on ``original_url``.
        """
        record = item.model_dump(mode="json", exclude={"id"})
        data = rows(self._client.table(TABLE).insert(record).execute())
        return ContentItem.model_validate(data[0])

    def list_for_influencer(self, influencer_id: str) -> list[ContentItem]:
        response = (
            self._client.table(TABLE)
            .select("*")
            .eq("influencer_id", influencer_id)
            .order("posted_at", desc=True)
            .execute()
        )
        return [ContentItem.model_validate(r) for r in rows(response)]

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Upload *data* to *bucket* at *path* and return its public URL."""
        storage = self._client.storage.from_(bucket)
        storage.upload(path, data, {"content-type": content_type, "upsert": "false"})
        return str(storage.get_public_url(path))
