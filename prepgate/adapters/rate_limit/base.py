"""Rate limiter interfaces.

Route dependencies talk to this abstraction, never to a concrete store, so
the in-process limiter can later be replaced by a shared one (e.g., Redis).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single admission decision.

    Attributes:
        allowed: Whether the caller may perform the guarded work.
        limit: Admissions permitted per window for this call site.
        remaining: Admissions left in the current window (0 when blocked).
        reset_at_ms: Clock reading (ms) at which the current window ends.
        retry_after_seconds: Suggested wait when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at_ms: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for keyed admission control with per-call budgets."""

    @abstractmethod
    def consume(self, key: str, *, limit: int, window_ms: int) -> RateLimitResult:
        """Count one call against ``key`` and decide whether it is admitted.

        Args:
            key: Namespaced caller identity, e.g. ``"login:1.2.3.4"``.
            limit: Maximum admissions per window for this call site.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

    def allow(self, key: str, limit: int, window_ms: int) -> bool:
        """Boolean shorthand for :meth:`consume`."""
        return self.consume(key, limit=limit, window_ms=window_ms).allowed

    @abstractmethod
    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when ``key`` is None."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of keys currently tracked."""
        raise NotImplementedError
