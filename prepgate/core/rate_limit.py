"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

- Routes declare their budget with ``Depends(rate_limited(namespace, ...))``.
- The key is ``<namespace>:<client identifier>``, e.g. ``external:github:1.2.3.4``.
- One process-wide limiter is shared by every route; budgets are per call site.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request

from prepgate.adapters.rate_limit.base import AbstractRateLimiter
from prepgate.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from prepgate.core.config import settings
from prepgate.core.errors import RateLimitExceededError
from prepgate.utils.keys import KEY_SEPARATOR, build_key, client_identifier, hash_key

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: int | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If the key cap changes (primarily in tests), the limiter is rebuilt.
    """

    global _limiter, _limiter_config

    config = settings.app.rate_limit_max_keys
    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryFixedWindowRateLimiter(max_keys=config)
        _limiter_config = config

    return _limiter


def reset_rate_limiter() -> None:
    """Drop the shared limiter so the next access starts from empty state."""

    global _limiter, _limiter_config
    _limiter = None
    _limiter_config = None


def rate_limited(
    namespace: str,
    *,
    limit: int | Callable[[], int],
    window_ms: int | Callable[[], int],
) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency enforcing ``limit`` calls per ``window_ms``.

    ``limit`` and ``window_ms`` may be callables so budgets follow settings
    changes at request time.

    Args:
        namespace: Key prefix for this call site, e.g. ``"external:github"``.
        limit: Admissions allowed per client per window.
        window_ms: Window length in milliseconds.

    Returns:
        An async dependency raising RateLimitExceededError when over budget.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not settings.app.rate_limit_enabled:
            return

        budget = limit() if callable(limit) else limit
        window = window_ms() if callable(window_ms) else window_ms

        client = client_identifier(request, trust_forwarded=settings.app.trust_forwarded_headers)
        key = build_key(*namespace.split(KEY_SEPARATOR), client)
        result = get_rate_limiter().consume(key, limit=budget, window_ms=window)

        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "namespace": namespace,
                    "key_hash": hash_key(key),
                    "limit": result.limit,
                    "remaining": result.remaining,
                },
            )
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "namespace": namespace,
                "key_hash": hash_key(key),
                "limit": result.limit,
                "window_ms": window,
                "retry_after_s": result.retry_after_seconds,
            },
        )
        retry_after = result.retry_after_seconds or 0
        request.state.rate_limited = True
        raise RateLimitExceededError(
            code="rate_limited",
            message="rate limit",
            details={
                "limit": result.limit,
                "remaining": result.remaining,
                # limiter clock is monotonic; clients get wall-clock epoch seconds
                "reset_at": int(time.time()) + retry_after,
                "retry_after": retry_after,
            },
        )

    return enforce_rate_limit
