"""Shared fixtures for careguide tests."""

from datetime import UTC, datetime, timedelta

import pytest


class FakeClock:
    """Controllable replacement for the cache's UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at a fixed instant until advanced."""
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=UTC))
