# core/cache.py

"""
Simple in-memory caching utilities.

The cache is process-local and best effort: entries may vanish at any
time and a value can be stale for up to its TTL. One instance lives on
``app.state.cache`` and is handed to handlers through ``get_cache``.
The clock is injectable so expiry can be driven from tests.
"""

import time
from typing import Any, Callable, Optional
from threading import Lock

from fastapi import Request


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, expires_at: float):
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class SimpleCache:
    """
    Simple in-memory cache with TTL support.

    Thread-safe for concurrent access.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, default_ttl_seconds: int = 300):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._clock = clock
        self.default_ttl_seconds = default_ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value from the cache.

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired(self._clock()):
                del self._cache[key]
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None):
        """
        Set a value in the cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Time to live in seconds (default: the cache's default TTL)
        """
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._cache[key] = CacheEntry(value, self._clock() + ttl)

    def delete(self, key: str):
        with self._lock:
            self._cache.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key starting with `prefix`; returns how many were removed."""
        with self._lock:
            doomed = [key for key in self._cache if key.startswith(prefix)]
            for key in doomed:
                del self._cache[key]
            return len(doomed)

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def cleanup_expired(self):
        """Remove all expired entries from the cache."""
        with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, entry in self._cache.items()
                if entry.is_expired(now)
            ]
            for key in expired_keys:
                del self._cache[key]

    def size(self) -> int:
        with self._lock:
            return len(self._cache)


def get_cache(request: Request) -> SimpleCache:
    """FastAPI dependency: the app's cache instance."""
    return request.app.state.cache
