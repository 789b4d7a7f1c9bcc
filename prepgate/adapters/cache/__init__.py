"""Response cache adapters.

Handlers memoize expensive upstream lookups through ``AbstractResponseCache``;
the in-memory implementation can be swapped for a shared store later.
"""

from prepgate.adapters.cache.base import AbstractResponseCache
from prepgate.adapters.cache.in_memory import InMemoryTTLCache

__all__ = ["AbstractResponseCache", "InMemoryTTLCache"]
