"""Shared pytest fixtures for the influencer CRM test suite.

``FakeSupabase`` is an in-memory stand-in for the supabase-py client.  It
implements the slice of the PostgREST query-builder API the stores use
(``table().select/insert/update/upsert/delete`` with ``eq``, ``neq``,
``in_``, ``ilike``, ``gte``, ``lt``, ``order`` and ``limit``) plus storage
``upload``/``get_public_url``/``remove``.
"""

from __future__ import annotations

import copy
import re
import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

import pytest
from postgrest.exceptions import APIError

from influencer_crm.config import Settings

_BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


def _ilike_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    """One chained PostgREST request against a :class:`FakeSupabase` table."""

    def __init__(self, db: FakeSupabase, table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._on_conflict = ""
        self._filters: list[Any] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: int | None = None

    # -- operations -----------------------------------------------------------

    def select(self, columns: str = "*") -> FakeQuery:
        self._op = "select"
        return self

    def insert(self, payload: Any) -> FakeQuery:
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> FakeQuery:
        self._op = "update"
        self._payload = payload
        return self

    def upsert(self, payload: Any, on_conflict: str = "") -> FakeQuery:
        self._op = "upsert"
        self._payload = payload
        self._on_conflict = on_conflict
        return self

    def delete(self) -> FakeQuery:
        self._op = "delete"
        return self

    # -- filters ----------------------------------------------------------------

    def eq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: list[Any]) -> FakeQuery:
        wanted = list(values)
        self._filters.append(lambda row: row.get(column) in wanted)
        return self

    def ilike(self, column: str, pattern: str) -> FakeQuery:
        regex = _ilike_regex(pattern)
        self._filters.append(
            lambda row: row.get(column) is not None and bool(regex.fullmatch(str(row[column])))
        )
        return self

    def gte(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(
            lambda row: row.get(column) is not None and str(row[column]) >= str(value)
        )
        return self

    def lt(self, column: str, value: Any) -> FakeQuery:
        self._filters.append(
            lambda row: row.get(column) is not None and str(row[column]) < str(value)
        )
        return self

    def order(self, column: str, *, desc: bool = False) -> FakeQuery:
        self._order.append((column, desc))
        return self

    def limit(self, size: int) -> FakeQuery:
        self._limit = size
        return self

    # -- execution --------------------------------------------------------------

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self) -> SimpleNamespace:
        self._db.executed.append((self._table, self._op))
        table = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            records = self._payload if isinstance(self._payload, list) else [self._payload]
            data = [self._db.insert_row(self._table, r) for r in records]
        elif self._op == "upsert":
            records = self._payload if isinstance(self._payload, list) else [self._payload]
            data = [self._upsert(r) for r in records]
        elif self._op == "update":
            others = [r for r in table if not self._matches(r)]
            self._db.check_unique(self._table, self._payload, others)
            data = []
            for row in table:
                if self._matches(row):
                    row.update(copy.deepcopy(self._payload))
                    data.append(copy.deepcopy(row))
        elif self._op == "delete":
            data = [copy.deepcopy(r) for r in table if self._matches(r)]
            self._db.tables[self._table] = [r for r in table if not self._matches(r)]
        else:
            data = [copy.deepcopy(r) for r in table if self._matches(r)]
            for column, desc in reversed(self._order):
                data.sort(
                    key=lambda r, c=column: (r.get(c) is None, str(r.get(c) or "")),
                    reverse=desc,
                )
            if self._limit is not None:
                data = data[: self._limit]

        return SimpleNamespace(data=data)

    def _upsert(self, record: dict[str, Any]) -> dict[str, Any]:
        keys = [k.strip() for k in self._on_conflict.split(",") if k.strip()]
        for row in self._db.tables.setdefault(self._table, []):
            if keys and all(row.get(k) == record.get(k) for k in keys):
                row.update(copy.deepcopy(record))
                return copy.deepcopy(row)
        return self._db.insert_row(self._table, record)


class FakeBucket:
    def __init__(self, db: FakeSupabase, bucket: str) -> None:
        self._db = db
        self._bucket = bucket

    def upload(self, path: str, file: bytes, file_options: dict[str, str] | None = None) -> None:
        if self._db.fail_uploads:
            raise RuntimeError("storage unavailable")
        self._db.uploads[(self._bucket, path)] = (file, dict(file_options or {}))

    def get_public_url(self, path: str) -> str:
        return f"https://storage.test/{self._bucket}/{path}"

    def remove(self, paths: list[str]) -> None:
        for path in paths:
            self._db.uploads.pop((self._bucket, path), None)
            self._db.removed.append((self._bucket, path))


class FakeStorage:
    def __init__(self, db: FakeSupabase) -> None:
        self._db = db

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self._db, bucket)


class FakeSupabase:
    """In-memory tables keyed by name, with optional unique columns per table."""

    def __init__(self, unique: dict[str, list[str]] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.unique = unique or {}
        self.uploads: dict[tuple[str, str], tuple[bytes, dict[str, str]]] = {}
        self.removed: list[tuple[str, str]] = []
        self.executed: list[tuple[str, str]] = []
        self.fail_uploads = False
        self.storage = FakeStorage(self)
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *records: dict[str, Any]) -> list[dict[str, Any]]:
        return [self.insert_row(table, r) for r in records]

    def check_unique(
        self, table: str, record: dict[str, Any], rows: list[dict[str, Any]]
    ) -> None:
        for column in self.unique.get(table, []):
            value = record.get(column)
            if value is not None and any(r.get(column) == value for r in rows):
                raise APIError(
                    {
                        "message": f'duplicate key value violates unique constraint "{column}"',
                        "code": "23505",
                    }
                )

    def insert_row(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        rows = self.tables.setdefault(table, [])
        self.check_unique(table, record, rows)
        row = copy.deepcopy(record)
        row.setdefault("id", str(uuid.uuid4()))
        self._clock += 1
        row.setdefault("created_at", (_BASE_TIME + timedelta(seconds=self._clock)).isoformat())
        rows.append(row)
        return copy.deepcopy(row)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def fake_db() -> FakeSupabase:
    """An empty in-memory Supabase with the production unique constraints."""
    return FakeSupabase(
        unique={
            "content": ["original_url"],
            "influencer_orders": ["shopify_order_id"],
        }
    )


@pytest.fixture()
def settings() -> Settings:
    """Settings with every credential filled and no ``.env`` lookups."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        supabase_url="https://project.supabase.co",
        supabase_service_role_key="service-role-key",  # type: ignore[arg-type]
        shopify_store_url="nama-test.myshopify.com",
        shopify_access_token="shpat_real_token",  # type: ignore[arg-type]
        shopify_client_secret="shopify-secret",  # type: ignore[arg-type]
        rapidapi_key="rapid-key",  # type: ignore[arg-type]
        apify_api_token="apify-token",  # type: ignore[arg-type]
        cron_secret="cron-secret",  # type: ignore[arg-type]
        app_url="https://crm.example.com",
    )
