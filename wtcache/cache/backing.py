from __future__ import annotations

from typing import Dict, Optional, Tuple

from wtcache.cache.interfaces import BackingStore, T


class MemoryBackingStore(BackingStore[T]):
    def __init__(self) -> None:
        self._store: Dict[str, T] = {}

    def put(self, tag: str, data: T) -> None:
        self._store[tag] = data

    def get(self, tag: str) -> Tuple[Optional[T], bool]:
        if tag in self._store:
            return self._store[tag], True
        return None, False

    def __contains__(self, tag: object) -> bool:
        return tag in self._store

    def __len__(self) -> int:
        return len(self._store)
