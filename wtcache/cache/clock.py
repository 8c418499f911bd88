from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""


class RealClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """Clock that only moves when told to, for reproducible LRU ordering."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self._now = _as_utc(start) if start is not None else datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float = 0.0, *, delta: Optional[timedelta] = None) -> datetime:
        step = delta if delta is not None else timedelta(seconds=seconds)
        if step < timedelta(0):
            raise ValueError(f"FakeClock cannot move backwards (step={step})")
        self._now += step
        return self._now

    def set(self, when: datetime) -> None:
        self._now = _as_utc(when)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
