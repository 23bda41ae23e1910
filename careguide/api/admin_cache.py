"""Admin API for inspecting and clearing the response cache."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from careguide.api.dependencies import get_cache_admin
from careguide.infrastructure.cache import CacheAdministration

logger = structlog.get_logger()
router = APIRouter(prefix="/api/admin", tags=["admin"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheStatsData(_CamelModel):
    """Cache statistics as exposed over HTTP."""

    total_entries: int
    total_hits: int
    expired_entries: int
    hit_rate: float
    average_hit_count: float


class CacheStatsResponse(BaseModel):
    data: CacheStatsData


class CacheClearedData(_CamelModel):
    message: str
    deleted_count: int


class CacheClearedResponse(BaseModel):
    data: CacheClearedData


def _internal_error(message: str) -> JSONResponse:
    """Error body that never carries internal details."""
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": message}},
    )


@router.get("/cache-stats", response_model=CacheStatsResponse, response_model_by_alias=True)
async def cache_stats(
    admin: Annotated[CacheAdministration, Depends(get_cache_admin)],
) -> CacheStatsResponse | JSONResponse:
    """Return cache size, hit totals and hit rate."""
    try:
        stats = await admin.get_stats()
    except Exception as e:
        logger.error("cache_stats_request_failed", error=str(e), error_type=type(e).__name__)
        return _internal_error("Failed to fetch cache statistics")

    return CacheStatsResponse(
        data=CacheStatsData(
            total_entries=stats.total_entries,
            total_hits=stats.total_hits,
            expired_entries=stats.expired_entries,
            hit_rate=stats.hit_rate,
            average_hit_count=stats.average_hit_count,
        )
    )


@router.delete("/cache", response_model=CacheClearedResponse, response_model_by_alias=True)
async def clear_cache(
    admin: Annotated[CacheAdministration, Depends(get_cache_admin)],
    pattern: str | None = None,
) -> CacheClearedResponse | JSONResponse:
    """Clear every cache entry, or only those whose query contains pattern."""
    try:
        if pattern:
            deleted = await admin.clear_matching(pattern)
        else:
            deleted = await admin.clear_all()
    except Exception as e:
        logger.error("cache_clear_request_failed", error=str(e), error_type=type(e).__name__)
        return _internal_error("Failed to clear cache")

    logger.info("cache_cleared_via_admin", pattern=pattern, deleted_count=deleted)
    return CacheClearedResponse(
        data=CacheClearedData(message="Cache cleared successfully", deleted_count=deleted)
    )


@router.post(
    "/cache/cleanup", response_model=CacheClearedResponse, response_model_by_alias=True
)
async def cleanup_cache(
    admin: Annotated[CacheAdministration, Depends(get_cache_admin)],
) -> CacheClearedResponse | JSONResponse:
    """Remove expired cache entries."""
    try:
        deleted = await admin.cleanup_expired()
    except Exception as e:
        logger.error("cache_cleanup_request_failed", error=str(e), error_type=type(e).__name__)
        return _internal_error("Failed to clean up cache")

    return CacheClearedResponse(
        data=CacheClearedData(message="Expired cache entries removed", deleted_count=deleted)
    )
