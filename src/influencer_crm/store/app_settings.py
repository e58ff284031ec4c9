"""Key/value application settings persisted in the ``app_settings`` table."""

from __future__ import annotations

from supabase import Client

from influencer_crm.store.client import rows, utc_now_iso

TABLE = "app_settings"


class AppSettingsStore:
    """Get and set string values by key."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def get(self, key: str) -> str | None:
        data = rows(self._client.table(TABLE).select("value").eq("key", key).execute())
        if not data:
            return None
        value = data[0].get("value")
        return str(value) if value else None

    def set(self, key: str, value: str) -> None:
        record = {"key": key, "value": value, "updated_at": utc_now_iso()}
        self._client.table(TABLE).upsert(record, on_conflict="key").execute()
