"""Cache interface used by services for cache-aside lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class AbstractResponseCache(ABC, Generic[T]):
    """Keyed store with per-entry time-to-live.

    Values are opaque to the cache. Concurrent get/compute/set sequences for
    the same key may both compute; the cache only promises that an expired
    value is never returned.
    """

    @abstractmethod
    def get(self, key: str) -> T | None:
        """Return the live value for ``key`` or None if absent/expired."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: T, ttl_ms: int) -> None:
        """Store ``value`` until ``now + ttl_ms``, replacing any prior entry."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``; return True if something was removed."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
