"""Influencer table access."""

from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from influencer_crm.domain.errors import DuplicateError, NotFoundError
from influencer_crm.domain.models import Influencer, InfluencerCreate, InfluencerUpdate
from influencer_crm.domain.types import (
    PartnershipType,
    RelationshipStatus,
    WhitelistingType,
    normalize_handle,
)
from influencer_crm.store.client import UNIQUE_VIOLATION, rows, utc_now_iso

TABLE = "influencers"


class InfluencerStore:
    """Read and write ``influencers`` rows."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def list_influencers(
        self,
        partnership_type: PartnershipType | None = None,
        relationship_status: RelationshipStatus | None = None,
        search: str | None = None,
        whitelisting_enabled: bool | None = None,
        whitelisting_type: WhitelistingType | None = None,
    ) -> list[Influencer]:
        """List influencers, newest first, with optional filters.

        Args:
            partnership_type: Only return influencers of this type.
            relationship_status: Only return influencers in this pipeline stage.
            search: Case-insensitive substring matched against name and handle.
            whitelisting_enabled: Only return influencers with this flag.
            whitelisting_type: Only return influencers whitelisting on these terms.

        Returns:
            Matching influencers ordered by ``created_at`` descending.
        """
        query = self._client.table(TABLE).select("*")
        if partnership_type is not None:
            query = query.eq("partnership_type", str(partnership_type))
        if relationship_status is not None:
            query = query.eq("relationship_status", str(relationship_status))
        if whitelisting_enabled is not None:
            query = query.eq("whitelisting_enabled", whitelisting_enabled)
        if whitelisting_type is not None:
            query = query.eq("whitelisting_type", str(whitelisting_type))
        response = query.order("created_at", desc=True).execute()
        result = [Influencer.model_validate(r) for r in rows(response)]

        if search:
            needle = search.strip().lower()
            result = [
                inf
                for inf in result
                if needle in inf.name.lower() or needle in inf.instagram_handle.lower()
            ]
        return result

    def get(self, influencer_id: str) -> Influencer:
        """Fetch one influencer.

        Raises:
            NotFoundError: If no row has *influencer_id*.
        """
        data = rows(self._client.table(TABLE).select("*").eq("id", influencer_id).execute())
        if not data:
            raise NotFoundError("influencer", influencer_id)
        return Influencer.model_validate(data[0])

    def find_by_handle(self, handle: str) -> Influencer | None:
        """Find an influencer by Instagram handle, ignoring case and ``@``."""
        wanted = normalize_handle(handle)
        if not wanted:
            return None
        query = self._client.table(TABLE).select("*").ilike("instagram_handle", wanted)
        data = rows(query.execute())
        # ilike treats "_" as a wildcard, so confirm the exact match here
        for row in data:
            if normalize_handle(row.get("instagram_handle") or "") == wanted:
                return Influencer.model_validate(row)
        return None

    def create(self, payload: InfluencerCreate, created_by: str | None = None) -> Influencer:
        """Insert a new influencer.

        Raises:
            DuplicateError: If an influencer with the same handle exists.
        """
        if self.find_by_handle(payload.instagram_handle) is not None:
            raise DuplicateError("influencer", payload.instagram_handle)

        record: dict[str, Any] = payload.model_dump(mode="json")
        if created_by is not None:
            record["created_by"] = created_by
        try:
            data = rows(self._client.table(TABLE).insert(record).execute())
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateError("influencer", payload.instagram_handle) from exc
            raise
        return Influencer.model_validate(data[0])

    def update(self, influencer_id: str, payload: InfluencerUpdate) -> Influencer:
        """Apply the fields set on *payload* to an influencer.

        Raises:
            DuplicateError: If the new handle belongs to another influencer.
            NotFoundError: If no row has *influencer_id*.
        """
        changes = payload.model_dump(mode="json", exclude_unset=True)
        if not changes:
            return self.get(influencer_id)

        handle = changes.get("instagram_handle")
        if handle:
            existing = self.find_by_handle(handle)
            if existing is not None and existing.id != influencer_id:
                raise DuplicateError("influencer", handle)

        changes["updated_at"] = utc_now_iso()
        try:
            data = rows(
                self._client.table(TABLE).update(changes).eq("id", influencer_id).execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateError("influencer", str(handle)) from exc
            raise
        if not data:
            raise NotFoundError("influencer", influencer_id)
        return Influencer.model_validate(data[0])

    def update_fields(self, influencer_id: str, changes: dict[str, Any]) -> None:
        """Write raw column values, used by enrichment jobs."""
        self._client.table(TABLE).update(changes).eq("id", influencer_id).execute()

    def delete(self, influencer_id: str) -> None:
        """Delete an influencer; memberships cascade in the database."""
        data = rows(self._client.table(TABLE).delete().eq("id", influencer_id).execute())
        if not data:
            raise NotFoundError("influencer", influencer_id)

    def handle_index(self) -> dict[str, str]:
        """Map lower-cased handle to influencer id for every influencer with a handle."""
        query = self._client.table(TABLE).select("id, instagram_handle").neq("instagram_handle", "")
        data = rows(query.execute())
        return {
            str(row["instagram_handle"]).lower(): str(row["id"])
            for row in data
            if row.get("instagram_handle")
        }
