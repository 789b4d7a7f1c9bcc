"""Millisecond clock shared by the limiter and the cache."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Return a monotonic reading in milliseconds (immune to wall-clock jumps)."""
    return time.monotonic() * 1000.0
