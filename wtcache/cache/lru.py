from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Generic, List, Optional

from wtcache.cache.backing import MemoryBackingStore
from wtcache.cache.clock import Clock, RealClock
from wtcache.cache.interfaces import BackingStore, CacheItem, T
from wtcache.errors import CacheConfigError, DataNotFoundError

logger = logging.getLogger(__name__)


class LRUCache(Generic[T]):
    """Fixed-capacity LRU cache in front of a write-through backing store.

    Every write reaches the backing store before ``write`` returns, so
    eviction never loses data: a later ``read`` re-admits the value from the
    store. Recency comes from the injected clock. When several resident items
    share the oldest timestamp, whichever one the scan meets first is evicted.

    Not thread-safe.
    """

    def __init__(
        self,
        capacity: int,
        clock: Optional[Clock] = None,
        backing_store: Optional[BackingStore[T]] = None,
    ) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise CacheConfigError(f"capacity must be a positive integer, got {capacity!r}")
        self._capacity = capacity
        self._clock: Clock = clock if clock is not None else RealClock()
        self._backing_store: BackingStore[T] = (
            backing_store if backing_store is not None else MemoryBackingStore()
        )
        self._items: Dict[str, CacheItem[T]] = {}
        self._uses = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        logger.debug("LRUCache created (capacity=%d, clock=%s)", capacity, type(self._clock).__name__)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def backing_store(self) -> BackingStore[T]:
        return self._backing_store

    @property
    def uses(self) -> int:
        return self._uses

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def evictions(self) -> int:
        return self._evictions

    def write(self, tag: str, data: T) -> None:
        """Upsert ``data`` under ``tag`` in both tiers."""
        self._uses += 1
        now = self._clock.now()

        item = self._items.get(tag)
        if item is not None:
            self._hits += 1
            item.data = data
            self._backing_store.put(tag, data)
            item.touch(now)
            return

        self._misses += 1
        self._backing_store.put(tag, data)
        self._admit(tag, data, now)

    def read(self, tag: str) -> CacheItem[T]:
        """Return the item for ``tag``, promoting it from the backing store on a miss.

        Raises ``DataNotFoundError`` when the tag was never written.
        """
        self._uses += 1
        now = self._clock.now()

        item = self._items.get(tag)
        if item is not None:
            self._hits += 1
            item.touch(now)
            return item

        self._misses += 1
        data, found = self._backing_store.get(tag)
        if not found:
            raise DataNotFoundError(tag)
        return self._admit(tag, data, now)

    def contains(self, tag: str) -> bool:
        return tag in self._items

    def peek(self, tag: str) -> Optional[CacheItem[T]]:
        return self._items.get(tag)

    def resident_tags(self) -> List[str]:
        return list(self._items)

    def reset_counters(self) -> None:
        self._uses = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __contains__(self, tag: object) -> bool:
        return tag in self._items

    def __len__(self) -> int:
        return len(self._items)

    def _admit(self, tag: str, data: T, now: datetime) -> CacheItem[T]:
        item = CacheItem(tag=tag, data=data, last_used=now)
        if len(self._items) >= self._capacity:
            victim = self._find_lru()
            if victim is not None:
                self._evict(victim)
        self._items[tag] = item
        return item

    def _find_lru(self) -> Optional[CacheItem[T]]:
        victim: Optional[CacheItem[T]] = None
        for item in self._items.values():
            if victim is None or item.last_used < victim.last_used:
                victim = item
        return victim

    def _evict(self, victim: CacheItem[T]) -> None:
        # Backing store already holds victim.data; nothing to flush.
        del self._items[victim.tag]
        self._evictions += 1
        logger.debug("Evicted %r (last_used=%s)", victim.tag, victim.last_used.isoformat())

    def stats(self) -> dict:
        hit_rate = self._hits / self._uses if self._uses else 0.0
        return {
            "uses": self._uses,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": hit_rate,
            "items": len(self._items),
            "capacity": self._capacity,
        }
