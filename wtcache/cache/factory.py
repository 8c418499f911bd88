from __future__ import annotations

from typing import Any, Optional

from wtcache.config import SimulatorConfig
from wtcache.cache.backing import MemoryBackingStore
from wtcache.cache.clock import EPOCH, Clock, FakeClock, RealClock
from wtcache.cache.interfaces import BackingStore
from wtcache.cache.lru import LRUCache
from wtcache.errors import CacheConfigError


def build_clock(cfg: SimulatorConfig) -> Clock:
    if cfg.clock == "fake":
        return FakeClock(start=EPOCH)
    if cfg.clock == "real":
        return RealClock()
    raise CacheConfigError(f"Unknown clock: {cfg.clock}")


def build_cache(
    cfg: SimulatorConfig,
    clock: Optional[Clock] = None,
    backing_store: Optional[BackingStore[Any]] = None,
) -> LRUCache[Any]:
    if cfg.policy != "lru":
        raise CacheConfigError(f"Unknown cache policy: {cfg.policy}")
    return LRUCache(
        cfg.capacity,
        clock=clock if clock is not None else build_clock(cfg),
        backing_store=backing_store if backing_store is not None else MemoryBackingStore(),
    )
