"""Shared fixtures for cache tests."""

from __future__ import annotations

import pytest

from libadmin.cache import InMemoryCache


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    """In-memory cache with a one-hour default TTL and no sweep thread."""
    c = InMemoryCache(default_ttl=3600, max_size=100, sweep_interval=0, timer=clock)
    yield c
    c.close()
