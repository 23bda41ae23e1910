"""Protocol and data types for the response cache."""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal, Protocol

SourceType = Literal["article", "faq", "video"]


def _now_utc() -> datetime:
    """Return current UTC time (for dataclass default)."""
    return datetime.now(UTC)


@dataclass
class CacheSource:
    """A content item an answer was built from."""

    type: SourceType
    id: int | str
    title: str
    url: str | None = None
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting unset optional fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheSource":
        return cls(
            type=data["type"],
            id=data["id"],
            title=data.get("title", ""),
            url=data.get("url"),
            category=data.get("category"),
        )


@dataclass
class CacheEntry:
    """A cached response keyed by query fingerprint.

    hit_count starts at 1 when the entry is created and grows with every
    live lookup and every rewrite of the same fingerprint.
    """

    fingerprint: str
    query_text: str
    response: str
    sources: list[CacheSource] | None = None
    hit_count: int = 1
    created_at: datetime = field(default_factory=_now_utc)
    expires_at: datetime = field(default_factory=_now_utc)

    def is_expired(self, now: datetime) -> bool:
        """Return True once the entry is no longer served.

        This is the one expiry rule shared by lookups, the cleanup sweep
        and statistics.
        """
        return self.expires_at <= now


@dataclass
class CacheStatistics:
    """Read-only snapshot of cache usage."""

    total_entries: int = 0
    total_hits: int = 0
    expired_entries: int = 0
    hit_rate: float = 0.0  # Percent of live entries hit more than once
    average_hit_count: float = 0.0  # Over live entries

    @classmethod
    def empty(cls) -> "CacheStatistics":
        return cls()

    @classmethod
    def from_entries(
        cls, entries: list[CacheEntry], now: datetime
    ) -> "CacheStatistics":
        """Aggregate statistics over a full set of entries."""
        live = [entry for entry in entries if not entry.is_expired(now)]
        reused = sum(1 for entry in live if entry.hit_count > 1)

        hit_rate = reused / len(live) * 100 if live else 0.0
        average = sum(entry.hit_count for entry in live) / len(live) if live else 0.0

        return cls(
            total_entries=len(entries),
            total_hits=sum(entry.hit_count for entry in entries),
            expired_entries=len(entries) - len(live),
            hit_rate=round(hit_rate, 2),
            average_hit_count=round(average, 2),
        )


class CacheStore(Protocol):
    """Protocol for durable cache storage backends.

    Implementations provide atomic single-entry primitives. They may raise
    on storage failures; the ResponseCache decides how failures surface.
    """

    async def fetch_live(self, fingerprint: str, *, now: datetime) -> CacheEntry | None:
        """Return the live entry for a fingerprint, counting the lookup.

        Increments the stored hit count of a live entry and returns the
        entry with the incremented count. Expired entries are not returned.
        """
        ...

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
        """Insert a new entry or atomically rewrite an existing one.

        New entries start with hit_count 1. Rewrites replace response,
        sources and expiry and increment hit_count.
        """
        ...

    async def delete_all(self) -> int:
        """Delete every entry and return how many were removed."""
        ...

    async def delete_expired(self, *, now: datetime) -> int:
        """Delete expired entries and return how many were removed."""
        ...

    async def delete_matching(self, pattern: str) -> int:
        """Delete entries whose query text contains pattern, ignoring case."""
        ...

    async def list_entries(self) -> list[CacheEntry]:
        """Return every stored entry, expired ones included."""
        ...
