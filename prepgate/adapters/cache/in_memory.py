"""In-memory TTL cache used to avoid repeated upstream lookups.

Expired entries are evicted lazily: on the ``get`` that finds them, and in a
sweep at the start of every ``set``. There is no background thread.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, TypeVar

from prepgate.adapters.cache.base import AbstractResponseCache
from prepgate.utils.clock import Clock, monotonic_ms
from prepgate.utils.keys import hash_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheItem(Generic[T]):
    """Container for cached values with expiration metadata."""

    value: T
    expires_at: float


class InMemoryTTLCache(AbstractResponseCache[T]):
    """Thread-safe, in-memory TTL cache with optional LRU cap.

    Args:
        max_entries: Maximum number of cached items (None for unlimited).
        clock: Time source returning milliseconds.
    """

    def __init__(self, max_entries: int | None = 1024, *, clock: Clock = monotonic_ms) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 or None")

        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem[T]] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryTTLCache(max_entries={self._max_entries}, size={len(self._store)}, "
            f"hits={self._hits}, misses={self._misses}, evictions={self._evictions})"
        )

    def get(self, key: str) -> T | None:
        """Retrieve a cached value if it exists and is not expired.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"key_hash": hash_key(key), "reason": "not_found"})
                return None

            if self._is_expired(item, self._clock()):
                self._evict_single(key)
                self._misses += 1
                logger.debug("cache.miss", extra={"key_hash": hash_key(key), "reason": "expired"})
                return None

            self._hits += 1
            self._store.move_to_end(key)  # mark as recently used
            logger.debug("cache.hit", extra={"key_hash": hash_key(key)})
            return item.value

    def set(self, key: str, value: T, ttl_ms: int) -> None:
        """Store a value until ``now + ttl_ms``, evicting as needed.

        A ``ttl_ms`` that is not a finite positive number (zero, negative,
        NaN, infinity) describes a value that cannot expire correctly: it is
        not stored, and any previous entry for ``key`` is dropped.
        """

        with self._lock:
            now = self._clock()
            if (
                not isinstance(ttl_ms, (int, float))
                or isinstance(ttl_ms, bool)
                or not 0 < ttl_ms < math.inf
            ):
                self._evict_single(key)
                logger.warning(
                    "cache.invalid_ttl",
                    extra={"key_hash": hash_key(key), "ttl_ms": ttl_ms},
                )
                return

            self._evict_expired_locked(now)
            self._store[key] = CacheItem(value=value, expires_at=now + ttl_ms)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={"key_hash": hash_key(key), "size": len(self._store), "ttl_ms": ttl_ms},
            )

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def purge_expired(self) -> int:
        with self._lock:
            return self._evict_expired_locked(self._clock())

    def stats(self) -> dict[str, int | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "max_entries": self._max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_single(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            self._evictions += 1

    def _evict_expired_locked(self, now: float) -> int:
        expired_keys = [k for k, item in self._store.items() if self._is_expired(item, now)]
        for key in expired_keys:
            self._evict_single(key)
        return len(expired_keys)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # popitem(last=False) removes the least recently used entry
            self._store.popitem(last=False)
            self._evictions += 1

    @staticmethod
    def _is_expired(item: CacheItem[T], now: float) -> bool:
        return now >= item.expires_at
