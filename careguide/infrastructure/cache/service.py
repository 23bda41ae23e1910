"""Response cache operations over a pluggable store."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import structlog

from careguide.config import resolve_ttl_hours
from careguide.infrastructure.cache.fingerprint import fingerprint_query
from careguide.infrastructure.cache.protocol import (
    CacheEntry,
    CacheSource,
    CacheStatistics,
    CacheStore,
)
from careguide.infrastructure.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


def _now_utc() -> datetime:
    return datetime.now(UTC)


class ResponseCache:
    """Exact-match response cache keyed by query fingerprint.

    Caching is an optimization: every store failure is logged and turned
    into a miss, a None write result, a zero count or empty statistics.
    Nothing raised by the store reaches the caller and nothing is retried.

    Note that get() is not read-only. A successful lookup increments the
    entry's hit count, which feeds the analytics in stats().
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        ttl_hours: int | Callable[[], object] = 24,
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Storage backend holding the entries.
            ttl_hours: Entry lifetime in hours, or a callable returning the
                configured value. Resolved on every put; invalid values
                fall back to 24 hours.
            clock: Returns the current time as an aware datetime.
        """
        self._store = store
        self._ttl_hours = ttl_hours
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        """Currently configured time-to-live."""
        configured = self._ttl_hours() if callable(self._ttl_hours) else self._ttl_hours
        return timedelta(hours=resolve_ttl_hours(configured))

    async def get(self, fingerprint: str) -> CacheEntry | None:
        """Return the live entry for a fingerprint and count the hit.

        Args:
            fingerprint: Key produced by fingerprint_query().

        Returns:
            The entry with its incremented hit count, or None on a miss,
            an expired entry, or a storage failure.
        """
        with tracer.start_as_current_span("cache.get") as span:
            try:
                entry = await self._store.fetch_live(fingerprint, now=self._clock())
            except Exception as e:
                span.record_exception(e)
                logger.error(
                    "cache_get_failed",
                    fingerprint=fingerprint,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

            span.set_attribute("cache.hit", entry is not None)
            if entry is None:
                logger.debug("cache_miss", fingerprint=fingerprint)
                return None

            logger.info("cache_hit", fingerprint=fingerprint, hit_count=entry.hit_count)
            return entry

    async def put(
        self,
        fingerprint: str,
        query_text: str,
        response: str,
        sources: list[CacheSource] | None = None,
    ) -> CacheEntry | None:
        """Store a response, replacing any entry for the same fingerprint.

        A rewrite refreshes the expiry and counts as a hit.

        Returns:
            The stored entry, or None if the store failed.
        """
        with tracer.start_as_current_span("cache.put") as span:
            now = self._clock()
            ttl = self.ttl
            span.set_attribute("cache.ttl_hours", ttl.total_seconds() / 3600)

            try:
                entry = await self._store.upsert(
                    fingerprint,
                    query_text,
                    response,
                    sources,
                    now=now,
                    expires_at=now + ttl,
                )
            except Exception as e:
                span.record_exception(e)
                logger.error(
                    "cache_put_failed",
                    fingerprint=fingerprint,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

            logger.debug(
                "cache_set",
                fingerprint=fingerprint,
                response_length=len(response),
                hit_count=entry.hit_count,
                expires_at=entry.expires_at.isoformat(),
            )
            return entry

    async def lookup(self, query: str) -> CacheEntry | None:
        """Fingerprint raw query text and look it up."""
        return await self.get(fingerprint_query(query))

    async def store(
        self,
        query: str,
        response: str,
        sources: list[CacheSource] | None = None,
    ) -> CacheEntry | None:
        """Fingerprint raw query text and store the response under it."""
        return await self.put(fingerprint_query(query), query, response, sources)

    async def invalidate_all(self) -> int:
        """Delete every entry.

        Called when content changes and every cached answer is stale.

        Returns:
            Number of entries removed, 0 if the store failed.
        """
        try:
            deleted = await self._store.delete_all()
        except Exception as e:
            logger.error("cache_invalidate_failed", error=str(e), error_type=type(e).__name__)
            return 0

        logger.info("cache_invalidated", deleted_count=deleted)
        return deleted

    async def invalidate_matching(self, pattern: str) -> int:
        """Delete entries whose query text contains pattern, ignoring case.

        An empty pattern invalidates everything.
        """
        if not pattern:
            return await self.invalidate_all()

        try:
            deleted = await self._store.delete_matching(pattern)
        except Exception as e:
            logger.error(
                "cache_invalidate_failed",
                pattern=pattern,
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0

        logger.info("cache_invalidated", pattern=pattern, deleted_count=deleted)
        return deleted

    async def cleanup_expired(self) -> int:
        """Delete expired entries. Safe to run repeatedly.

        Returns:
            Number of entries removed, 0 if the store failed.
        """
        try:
            deleted = await self._store.delete_expired(now=self._clock())
        except Exception as e:
            logger.error("cache_cleanup_failed", error=str(e), error_type=type(e).__name__)
            return 0

        logger.info("cache_cleanup_complete", deleted_count=deleted)
        return deleted

    async def stats(self) -> CacheStatistics:
        """Aggregate usage statistics over all stored entries.

        Returns:
            A snapshot computed at call time, zeroed if the store failed.
        """
        try:
            entries = await self._store.list_entries()
        except Exception as e:
            logger.error("cache_stats_failed", error=str(e), error_type=type(e).__name__)
            return CacheStatistics.empty()

        return CacheStatistics.from_entries(entries, self._clock())
