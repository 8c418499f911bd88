from __future__ import annotations

from datetime import datetime, timezone

import pytest

from wtcache.cache.clock import FakeClock
from wtcache.cache.lru import LRUCache

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(start=T0)


@pytest.fixture
def cache(fake_clock: FakeClock) -> LRUCache:
    return LRUCache(2, clock=fake_clock)
