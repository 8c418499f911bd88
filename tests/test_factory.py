from __future__ import annotations

from dataclasses import replace

import pytest

from wtcache.cache.backing import MemoryBackingStore
from wtcache.cache.clock import EPOCH, FakeClock, RealClock
from wtcache.cache.factory import build_cache, build_clock
from wtcache.config import SimulatorConfig, WorkloadConfig
from wtcache.errors import CacheConfigError


def _cfg(**overrides: object) -> SimulatorConfig:
    cfg = SimulatorConfig(
        seed=1,
        capacity=3,
        capacity_fraction=None,
        policy="lru",
        clock="fake",
        clock_step_ms=1,
        log_level="INFO",
        workload=WorkloadConfig(),
    )
    return replace(cfg, **overrides)


def test_build_clock_kinds() -> None:
    fake = build_clock(_cfg())
    assert isinstance(fake, FakeClock)
    assert fake.now() == EPOCH
    assert isinstance(build_clock(_cfg(clock="real")), RealClock)


def test_build_cache_uses_capacity_and_injected_parts() -> None:
    clock = FakeClock(start=EPOCH)
    store: MemoryBackingStore[int] = MemoryBackingStore()

    cache = build_cache(_cfg(), clock=clock, backing_store=store)

    assert cache.capacity == 3
    assert cache.clock is clock
    assert cache.backing_store is store


@pytest.mark.parametrize("overrides", [{"policy": "lfu"}, {"clock": "sundial"}, {"capacity": 0}])
def test_build_cache_rejects_bad_settings(overrides: dict) -> None:
    with pytest.raises(CacheConfigError):
        build_cache(_cfg(**overrides))
