"""Health check endpoints."""

from typing import Annotated, Literal

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from careguide.api.dependencies import get_database
from careguide.config import Settings, get_settings
from careguide.infrastructure.database import Database

logger = structlog.get_logger()
router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: Literal["healthy", "unhealthy"]
    version: str


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
    database: Annotated[Database | None, Depends(get_database)],
) -> HealthResponse:
    """Report service health.

    Runs a trivial query when the cache is backed by SQLite. The cache
    itself degrades to misses on storage errors, so this is the only
    place an unreachable database becomes visible.

    Raises:
        HTTPException: 503 if the database is unavailable.
    """
    if database is not None:
        try:
            await database.execute("SELECT 1")
        except Exception as e:
            logger.error("health_check_failed", error=str(e), error_type=type(e).__name__)
            raise HTTPException(
                status_code=503,
                detail=f"Service unhealthy: {type(e).__name__}",
            ) from e

    return HealthResponse(status="healthy", version=settings.app_version)
