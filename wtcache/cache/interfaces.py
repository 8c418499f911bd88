from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class CacheItem(Generic[T]):
    tag: str
    data: T
    last_used: datetime

    def touch(self, now: datetime) -> None:
        self.last_used = now


class BackingStore(ABC, Generic[T]):
    """Durable tier behind the cache: unbounded, no eviction."""

    @abstractmethod
    def put(self, tag: str, data: T) -> None:
        """Insert or overwrite the value stored under tag."""

    @abstractmethod
    def get(self, tag: str) -> Tuple[Optional[T], bool]:
        """Return (data, found); absence is reported, never raised."""
