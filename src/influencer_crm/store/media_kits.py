"""Media-kit files: ``influencer_media_kits`` rows backed by the ``media-kits`` bucket."""

from __future__ import annotations

import time

import structlog
from supabase import Client

from influencer_crm.domain.errors import NotFoundError
from influencer_crm.domain.models import InfluencerMediaKit
from influencer_crm.store.client import rows

logger = structlog.get_logger()

TABLE = "influencer_media_kits"
MEDIA_KIT_BUCKET = "media-kits"


def object_path(file_url: str) -> str | None:
    """Recover a kit's storage path from its public URL."""
    marker = f"/{MEDIA_KIT_BUCKET}/"
    if marker not in file_url:
        return None
    return file_url.split(marker, 1)[1]


class MediaKitStore:
    """Upload, list and delete an influencer's media-kit files."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def list_for_influencer(self, influencer_id: str) -> list[InfluencerMediaKit]:
        response = (
            self._client.table(TABLE)
            .select("*")
            .eq("influencer_id", influencer_id)
            .order("uploaded_at", desc=True)
            .execute()
        )
        return [InfluencerMediaKit.model_validate(r) for r in rows(response)]

    def add(
        self, influencer_id: str, file_name: str, data: bytes, content_type: str
    ) -> InfluencerMediaKit:
        """Upload a file under the influencer's folder and record it.

        Args:
            influencer_id: Owner of the media kit.
            file_name: Original file name, kept for display.
            data: File contents.
            content_type: MIME type sent to storage.

        Returns:
            The stored media-kit row.
        """
        path = f"{influencer_id}/{int(time.time() * 1000)}-{file_name}"
        bucket = self._client.storage.from_(MEDIA_KIT_BUCKET)
        bucket.upload(path, data, {"content-type": content_type, "upsert": "false"})
        record = {
            "influencer_id": influencer_id,
            "file_url": str(bucket.get_public_url(path)),
            "file_name": file_name,
            "file_size": len(data),
        }
        kit = InfluencerMediaKit.model_validate(
            rows(self._client.table(TABLE).insert(record).execute())[0]
        )
        logger.info("media_kit_uploaded", influencer_id=influencer_id, media_kit_id=kit.id)
        return kit

    def delete(self, influencer_id: str, media_kit_id: str) -> None:
        """Remove the stored file, then the row.

        Raises:
            NotFoundError: If the influencer has no kit *media_kit_id*.
        """
        data = rows(
            self._client.table(TABLE)
            .select("*")
            .eq("id", media_kit_id)
            .eq("influencer_id", influencer_id)
            .execute()
        )
        if not data:
            raise NotFoundError("media kit", media_kit_id)

        path = object_path(str(data[0].get("file_url") or ""))
        if path:
            self._client.storage.from_(MEDIA_KIT_BUCKET).remove([path])
        self._client.table(TABLE).delete().eq("id", media_kit_id).execute()
