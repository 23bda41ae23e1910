"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_TTL_HOURS = 24


def resolve_ttl_hours(value: object) -> int:
    """Coerce a configured TTL to a positive number of hours.

    Missing, non-numeric and non-positive values fall back to
    DEFAULT_CACHE_TTL_HOURS instead of raising.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_CACHE_TTL_HOURS
    try:
        hours = int(str(value).strip())
    except ValueError:
        return DEFAULT_CACHE_TTL_HOURS
    if hours <= 0:
        return DEFAULT_CACHE_TTL_HOURS
    return hours


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "careguide"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_path: str = "./data/careguide.db"

    # Response cache
    cache_backend: Literal["sqlite", "memory"] = "sqlite"
    cache_ttl_hours: int = DEFAULT_CACHE_TTL_HOURS

    # Embeddings (OpenAI-compatible endpoint)
    embedding_api_key: SecretStr | None = None
    embedding_base_url: str = "https://api.minimax.io/v1"
    embedding_model: str = "embo-01"
    embedding_timeout_seconds: float = 30.0

    # Circuit breaker
    circuit_breaker_fail_max: int = 5
    circuit_breaker_timeout: float = 60.0

    # Content search
    search_limit: int = 5  # Number of results to return
    search_min_score: float = 0.3  # Results must score above this similarity

    # Tracing
    tracing_enabled: bool = False
    otlp_endpoint: str | None = None
    tracing_console_export: bool = False
    tracing_sample_rate: float = 1.0

    @field_validator("cache_ttl_hours", mode="before")
    @classmethod
    def _fallback_ttl(cls, value: object) -> int:
        return resolve_ttl_hours(value)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
