"""In-process cache store."""

from dataclasses import replace
from datetime import datetime

import structlog

from careguide.infrastructure.cache.protocol import CacheEntry, CacheSource

logger = structlog.get_logger()


class InMemoryCacheStore:
    """Cache store holding entries in a dict keyed by fingerprint.

    Each primitive completes without awaiting, so it is atomic with
    respect to other coroutines on the same event loop. Entries are lost
    on restart; use it for tests and single-process development.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    async def fetch_live(self, fingerprint: str, *, now: datetime) -> CacheEntry | None:
        entry = self._entries.get(fingerprint)
        if entry is None or entry.is_expired(now):
            return None

        entry.hit_count += 1
        return replace(entry)

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
        existing = self._entries.get(fingerprint)
        if existing is None:
            entry = CacheEntry(
                fingerprint=fingerprint,
                query_text=query_text,
                response=response,
                sources=list(sources) if sources is not None else None,
                hit_count=1,
                created_at=now,
                expires_at=expires_at,
            )
        else:
            entry = replace(
                existing,
                response=response,
                sources=list(sources) if sources is not None else None,
                hit_count=existing.hit_count + 1,
                expires_at=expires_at,
            )

        self._entries[fingerprint] = entry
        return replace(entry)

    async def delete_all(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    async def delete_expired(self, *, now: datetime) -> int:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def delete_matching(self, pattern: str) -> int:
        needle = pattern.lower()
        matched = [
            key
            for key, entry in self._entries.items()
            if needle in entry.query_text.lower()
        ]
        for key in matched:
            del self._entries[key]

        logger.debug("memory_cache_pattern_delete", pattern=pattern, deleted=len(matched))
        return len(matched)

    async def list_entries(self) -> list[CacheEntry]:
        return [replace(entry) for entry in self._entries.values()]
