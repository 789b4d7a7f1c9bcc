"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: check-and-increment happens under one lock.
- A window opens on the first call for a key (not on an epoch boundary) and
  resets abruptly once ``window_ms`` has elapsed, so up to ``2 * limit`` calls
  can be admitted across a boundary.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import OrderedDict
from dataclasses import dataclass

from prepgate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from prepgate.utils.clock import Clock, monotonic_ms
from prepgate.utils.keys import hash_key

logger = logging.getLogger(__name__)


@dataclass
class _WindowState:
    window_start: float
    window_ms: float
    count: int

    def expired(self, now: float, window_ms: float | None = None) -> bool:
        return now - self.window_start >= (window_ms or self.window_ms)


def _is_positive_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window counter keyed by arbitrary strings.

    Budgets are supplied per call, so two routes may share a key namespace
    with different limits. Any string is a key, the empty one included.
    Malformed calls (non-string key, non-positive limit or window) are
    rejected with ``allowed=False`` and never raise.

    Args:
        max_keys: Cap on tracked keys. When a new key arrives at the cap,
            elapsed windows are purged first and then the least recently
            reset key is dropped. ``None`` keeps every key for the life of
            the process.
        clock: Time source returning milliseconds.
    """

    def __init__(
        self,
        *,
        max_keys: int | None = None,
        clock: Clock = monotonic_ms,
    ) -> None:
        if max_keys is not None and max_keys < 1:
            raise ValueError("max_keys must be >= 1 or None")

        self._max_keys = max_keys
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: OrderedDict[str, _WindowState] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryFixedWindowRateLimiter(max_keys={self._max_keys}, keys={len(self)})"

    def consume(self, key: str, *, limit: int, window_ms: int) -> RateLimitResult:
        """Apply the fixed-window decision for ``key``.

        - no record, or the window has elapsed: open a new window with count 1
        - count below limit: increment and admit
        - otherwise: reject without touching the record
        """

        if not isinstance(key, str) or not (
            _is_positive_number(limit) and _is_positive_number(window_ms)
        ):
            logger.warning(
                "rate_limit.invalid_arguments",
                extra={
                    "key_type": type(key).__name__,
                    "limit": limit,
                    "window_ms": window_ms,
                },
            )
            return RateLimitResult(
                allowed=False,
                limit=limit if _is_positive_number(limit) else 0,
                remaining=0,
                reset_at_ms=0,
                retry_after_seconds=None,
            )

        with self._lock:
            now = self._clock()
            state = self._state_by_key.get(key)

            if state is None or state.expired(now, window_ms):
                if state is None:
                    self._make_room_locked(now)
                state = _WindowState(window_start=now, window_ms=window_ms, count=1)
                self._state_by_key[key] = state
                self._state_by_key.move_to_end(key)
                return self._result(True, limit, state, now)

            state.window_ms = window_ms
            if state.count < limit:
                state.count += 1
                return self._result(True, limit, state, now)

            return self._result(False, limit, state, now)

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._state_by_key.clear()
            else:
                self._state_by_key.pop(key, None)

    def purge_expired(self) -> int:
        """Drop records whose last window has elapsed; return how many."""

        with self._lock:
            return self._purge_expired_locked(self._clock())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [k for k, state in self._state_by_key.items() if state.expired(now)]
        for key in expired:
            del self._state_by_key[key]
        return len(expired)

    def _make_room_locked(self, now: float) -> None:
        if self._max_keys is None or len(self._state_by_key) < self._max_keys:
            return

        purged = self._purge_expired_locked(now)
        dropped = 0
        while len(self._state_by_key) >= self._max_keys:
            # oldest window start first
            key, _ = self._state_by_key.popitem(last=False)
            dropped += 1
            logger.debug("rate_limit.key_dropped", extra={"key_hash": hash_key(key)})

        logger.info(
            "rate_limit.capacity_reached",
            extra={"max_keys": self._max_keys, "purged": purged, "dropped": dropped},
        )

    @staticmethod
    def _result(allowed: bool, limit: int, state: _WindowState, now: float) -> RateLimitResult:
        reset_at = state.window_start + state.window_ms
        return RateLimitResult(
            allowed=allowed,
            limit=int(limit),
            remaining=max(0, int(limit - state.count)),
            reset_at_ms=int(math.ceil(reset_at)),
            retry_after_seconds=None if allowed else max(1, math.ceil((reset_at - now) / 1000)),
        )
