"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from careguide.api.admin_cache import router as admin_cache_router
from careguide.api.health import router as health_router
from careguide.config import Settings, get_settings
from careguide.infrastructure.cache import (
    CacheAdministration,
    CacheStore,
    InMemoryCacheStore,
    ResponseCache,
    SQLiteCacheStore,
)
from careguide.infrastructure.database import Database
from careguide.infrastructure.embeddings import OpenAIEmbeddingProvider
from careguide.infrastructure.observability import (
    init_observability,
    shutdown_observability,
)
from careguide.modules.retrieval import RetrievalService

logger = structlog.get_logger()


def _configured_ttl_hours() -> int:
    return Settings().cache_ttl_hours


def build_response_cache(database: Database | None) -> ResponseCache:
    """Assemble the response cache for the configured backend.

    CACHE_TTL_HOURS is re-read from the environment on every write, so a
    changed value applies to the next entry without a restart.
    """
    store: CacheStore
    if database is None:
        store = InMemoryCacheStore()
    else:
        store = SQLiteCacheStore(database)

    return ResponseCache(store, ttl_hours=_configured_ttl_hours)


def build_retrieval_service(
    settings: Settings, cache: ResponseCache
) -> RetrievalService | None:
    """Create the retrieval service when an embedding key is configured."""
    if settings.embedding_api_key is None:
        logger.warning("retrieval_disabled", reason="EMBEDDING_API_KEY not set")
        return None

    provider = OpenAIEmbeddingProvider(
        api_key=settings.embedding_api_key.get_secret_value(),
        model=settings.embedding_model,
        base_url=settings.embedding_base_url,
        timeout_seconds=settings.embedding_timeout_seconds,
        circuit_breaker_fail_max=settings.circuit_breaker_fail_max,
        circuit_breaker_timeout=settings.circuit_breaker_timeout,
    )
    return RetrievalService(
        provider,
        cache,
        limit=settings.search_limit,
        min_score=settings.search_min_score,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the cache stack on startup and release it on shutdown."""
    settings = get_settings()

    database: Database | None = None
    if settings.cache_backend == "sqlite":
        database = Database(settings.database_path)
        await database.connect()

    cache = build_response_cache(database)
    app.state.database = database
    app.state.response_cache = cache
    app.state.cache_admin = CacheAdministration(cache)
    app.state.retrieval_service = build_retrieval_service(settings, cache)
    logger.info(
        "response_cache_initialized",
        backend=settings.cache_backend,
        ttl_hours=settings.cache_ttl_hours,
    )

    yield

    if database is not None:
        await database.disconnect()
    app.state.database = None
    app.state.retrieval_service = None
    app.state.cache_admin = None
    shutdown_observability()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(admin_cache_router)

init_observability(
    settings.app_name,
    settings.app_version,
    enabled=settings.tracing_enabled,
    otlp_endpoint=settings.otlp_endpoint,
    console_export=settings.tracing_console_export,
    sample_rate=settings.tracing_sample_rate,
    debug=settings.debug,
    app=app,
)
