"""Tests for application settings."""

import pytest

from careguide.config import DEFAULT_CACHE_TTL_HOURS, Settings, resolve_ttl_hours


class TestResolveTtlHours:
    """Tests for resolve_ttl_hours()."""

    @pytest.mark.parametrize(("value", "expected"), [(1, 1), (48, 48), ("6", 6), (" 12 ", 12)])
    def test_valid_values_are_kept(self, value, expected):
        """Positive integers, including numeric strings, are accepted."""
        assert resolve_ttl_hours(value) == expected

    @pytest.mark.parametrize("value", [None, 0, -1, "abc", "", "1.5", True, False])
    def test_invalid_values_fall_back(self, value):
        """Anything else means the default TTL."""
        assert resolve_ttl_hours(value) == DEFAULT_CACHE_TTL_HOURS


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Settings should have sensible defaults."""
        monkeypatch.delenv("CACHE_TTL_HOURS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.cache_ttl_hours == 24
        assert settings.cache_backend == "sqlite"
        assert settings.search_min_score == 0.3

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_invalid_ttl_from_environment_falls_back(self, monkeypatch, raw):
        """A bad CACHE_TTL_HOURS should not stop the app from starting."""
        monkeypatch.setenv("CACHE_TTL_HOURS", raw)

        assert Settings(_env_file=None).cache_ttl_hours == 24

    def test_valid_ttl_from_environment(self, monkeypatch):
        """A positive CACHE_TTL_HOURS should be used."""
        monkeypatch.setenv("CACHE_TTL_HOURS", "2")

        assert Settings(_env_file=None).cache_ttl_hours == 2
