"""FastAPI dependencies resolving components built at startup."""

from fastapi import HTTPException, Request

from careguide.infrastructure.cache import CacheAdministration
from careguide.infrastructure.database import Database
from careguide.modules.retrieval import RetrievalService


def get_cache_admin(request: Request) -> CacheAdministration:
    """Return the cache administration facade attached to the app."""
    admin: CacheAdministration | None = getattr(request.app.state, "cache_admin", None)
    if admin is None:
        raise HTTPException(status_code=503, detail="Cache not initialized")
    return admin


def get_database(request: Request) -> Database | None:
    """Return the app database, or None when the cache runs in memory."""
    return getattr(request.app.state, "database", None)


def get_retrieval_service(request: Request) -> RetrievalService:
    """Return the retrieval service, 503 when no embedding key is configured."""
    service: RetrievalService | None = getattr(request.app.state, "retrieval_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Retrieval not configured")
    return service
