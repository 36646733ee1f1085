"""
Key/value cache with per-entry TTL.

CacheStore is the seam for swapping in a shared cache. The default
in-memory implementation stores deep copies so cached values cannot be
mutated by callers.
"""

import copy
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple


class CacheStore(ABC):
    """Interface for TTL caches used by the reference client and recommendation service."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value for ttl_seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""


class InMemoryCacheStore(CacheStore):
    """
    In-process cache with TTL expiry.

    Expired entries are dropped lazily on read and swept periodically.
    """

    def __init__(self, cleanup_interval: int = 3600, clock=time.monotonic):
        """
        Initialize the cache.

        Args:
            cleanup_interval: Seconds between sweeps of expired entries
            clock: Callable returning the current time in seconds
        """
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._clock = clock
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = clock()

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a cached value.

        Args:
            key: Cache key

        Returns:
            Deep copy of the value if present and not expired, None otherwise
        """
        self._maybe_cleanup()

        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None

        return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value.

        Args:
            key: Cache key
            value: Value to store (deep-copied)
            ttl_seconds: Time-to-live; zero or less means the value is not stored
        """
        if ttl_seconds <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = (copy.deepcopy(value), self._clock() + ttl_seconds)
        self._maybe_cleanup()

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _maybe_cleanup(self) -> None:
        """Sweep expired entries at most once per cleanup interval."""
        now = self._clock()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        expired_keys = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired_keys:
            del self._entries[key]


# Global singleton instance
_cache_store: Optional[CacheStore] = None


def get_cache_store() -> CacheStore:
    """
    Get the global cache store instance.

    Returns:
        CacheStore instance
    """
    global _cache_store
    if _cache_store is None:
        _cache_store = InMemoryCacheStore()
    return _cache_store
