"""Process-wide response cache handle."""

from __future__ import annotations

from typing import Any

from prepgate.adapters.cache.in_memory import InMemoryTTLCache
from prepgate.core.config import settings

_cache: InMemoryTTLCache[Any] | None = None
_cache_config: int | None = None


def get_response_cache() -> InMemoryTTLCache[Any]:
    """Return the shared cache, rebuilding it if ``CACHE_MAX_ENTRIES`` changed."""

    global _cache, _cache_config

    config = settings.cache.max_entries
    if _cache is None or _cache_config != config:
        _cache = InMemoryTTLCache(max_entries=config)
        _cache_config = config

    return _cache


def reset_response_cache() -> None:
    global _cache, _cache_config
    _cache = None
    _cache_config = None
