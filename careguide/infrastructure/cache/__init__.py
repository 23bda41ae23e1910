"""Response caching infrastructure keyed by normalized query fingerprints."""

from careguide.infrastructure.cache.admin import CacheAdministration
from careguide.infrastructure.cache.exceptions import CacheError, CacheStorageError
from careguide.infrastructure.cache.fingerprint import fingerprint_query, normalize_query
from careguide.infrastructure.cache.memory_store import InMemoryCacheStore
from careguide.infrastructure.cache.protocol import (
    CacheEntry,
    CacheSource,
    CacheStatistics,
    CacheStore,
)
from careguide.infrastructure.cache.service import ResponseCache
from careguide.infrastructure.cache.sqlite_store import SQLiteCacheStore

__all__ = [
    "CacheAdministration",
    "CacheEntry",
    "CacheError",
    "CacheSource",
    "CacheStatistics",
    "CacheStorageError",
    "CacheStore",
    "InMemoryCacheStore",
    "ResponseCache",
    "SQLiteCacheStore",
    "fingerprint_query",
    "normalize_query",
]
