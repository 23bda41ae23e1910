"""SQLite-backed cache store."""

import json
import sqlite3
from datetime import UTC, datetime

from careguide.infrastructure.cache.exceptions import CacheStorageError
from careguide.infrastructure.cache.protocol import CacheEntry, CacheSource
from careguide.infrastructure.database import Database

_COLUMNS = "fingerprint, query_text, response, sources, hit_count, created_at, expires_at"

_UPSERT = f"""
INSERT INTO response_cache
    (fingerprint, query_text, response, sources, hit_count, created_at, expires_at)
VALUES (?, ?, ?, ?, 1, ?, ?)
ON CONFLICT(fingerprint) DO UPDATE SET
    response = excluded.response,
    sources = excluded.sources,
    expires_at = excluded.expires_at,
    hit_count = response_cache.hit_count + 1
RETURNING {_COLUMNS}
"""

_COUNT_HIT = f"""
UPDATE response_cache SET hit_count = hit_count + 1
WHERE fingerprint = ? AND expires_at > ?
RETURNING {_COLUMNS}
"""


def _to_db_time(value: datetime) -> str:
    """Fixed-width UTC ISO-8601 so string order matches time order."""
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _from_db_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _dump_sources(sources: list[CacheSource] | None) -> str | None:
    if sources is None:
        return None
    return json.dumps([source.to_dict() for source in sources])


def _load_sources(raw: str | None) -> list[CacheSource] | None:
    if raw is None:
        return None
    return [CacheSource.from_dict(item) for item in json.loads(raw)]


def _row_to_entry(row: sqlite3.Row) -> CacheEntry:
    return CacheEntry(
        fingerprint=row["fingerprint"],
        query_text=row["query_text"],
        response=row["response"],
        sources=_load_sources(row["sources"]),
        hit_count=int(row["hit_count"]),
        created_at=_from_db_time(row["created_at"]),
        expires_at=_from_db_time(row["expires_at"]),
    )


class SQLiteCacheStore:
    """Cache store persisting entries in the response_cache table.

    Every primitive is a single statement: upserts rely on the unique
    fingerprint constraint and both upserts and counted lookups read the
    row back with RETURNING. Driver and connection errors are raised as
    CacheStorageError.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def fetch_live(self, fingerprint: str, *, now: datetime) -> CacheEntry | None:
        try:
            row = await self._db.fetch_one(_COUNT_HIT, (fingerprint, _to_db_time(now)))
        except (sqlite3.Error, RuntimeError) as e:
            raise CacheStorageError(f"Cache lookup failed: {e}") from e

        return _row_to_entry(row) if row is not None else None

    async def upsert(
        self,
        fingerprint: str,
        query_text: str,
        response: str,
        sources: list[CacheSource] | None,
        *,
        now: datetime,
        expires_at: datetime,
    ) -> CacheEntry:
        try:
            row = await self._db.fetch_one(
                _UPSERT,
                (
                    fingerprint,
                    query_text,
                    response,
                    _dump_sources(sources),
                    _to_db_time(now),
                    _to_db_time(expires_at),
                ),
            )
        except (sqlite3.Error, RuntimeError) as e:
            raise CacheStorageError(f"Cache write failed: {e}") from e

        if row is None:
            raise CacheStorageError("Cache write did not persist")
        return _row_to_entry(row)

    async def delete_all(self) -> int:
        return await self._delete("DELETE FROM response_cache", None)

    async def delete_expired(self, *, now: datetime) -> int:
        return await self._delete(
            "DELETE FROM response_cache WHERE expires_at <= ?",
            (_to_db_time(now),),
        )

    async def delete_matching(self, pattern: str) -> int:
        return await self._delete(
            "DELETE FROM response_cache WHERE instr(lower(query_text), ?) > 0",
            (pattern.lower(),),
        )

    async def list_entries(self) -> list[CacheEntry]:
        try:
            rows = await self._db.fetch_all(
                f"SELECT {_COLUMNS} FROM response_cache ORDER BY id"
            )
        except (sqlite3.Error, RuntimeError) as e:
            raise CacheStorageError(f"Cache scan failed: {e}") from e
        return [_row_to_entry(row) for row in rows]

    async def _delete(self, sql: str, parameters: tuple[object, ...] | None) -> int:
        try:
            cursor = await self._db.execute(sql, parameters)
        except (sqlite3.Error, RuntimeError) as e:
            raise CacheStorageError(f"Cache delete failed: {e}") from e
        return max(cursor.rowcount, 0)
