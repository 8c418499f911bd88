"""Exception hierarchy for wtcache.

Imported by every layer of the package, so it stays dependency-free.
"""

from __future__ import annotations


class WTCacheError(Exception):
    """Base exception for all wtcache errors."""


class DataNotFoundError(WTCacheError, KeyError):
    """Raised when a tag is in neither the fast tier nor the backing store."""

    def __init__(self, tag: str) -> None:
        super().__init__(tag)
        self.tag = tag

    def __str__(self) -> str:
        return f"the data requested is not in the backing store: {self.tag!r}"


class CacheConfigError(WTCacheError, ValueError):
    """Raised for invalid cache or simulator configuration."""


class TraceFormatError(WTCacheError, ValueError):
    """Raised for unreadable trace files or records."""
