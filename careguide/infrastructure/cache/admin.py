"""Administrative operations over the response cache."""

from careguide.infrastructure.cache.protocol import CacheStatistics
from careguide.infrastructure.cache.service import ResponseCache


class CacheAdministration:
    """Stateless facade used by the admin API."""

    def __init__(self, cache: ResponseCache) -> None:
        self._cache = cache

    async def get_stats(self) -> CacheStatistics:
        return await self._cache.stats()

    async def clear_all(self) -> int:
        return await self._cache.invalidate_all()

    async def clear_matching(self, pattern: str) -> int:
        return await self._cache.invalidate_matching(pattern)

    async def cleanup_expired(self) -> int:
        return await self._cache.cleanup_expired()
