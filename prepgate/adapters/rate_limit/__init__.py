"""Rate limiting adapters.

A small abstraction layer so the service can start with an in-memory limiter
and later migrate to Redis or another shared store without changing the API
layer.
"""

from prepgate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from prepgate.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = ["AbstractRateLimiter", "InMemoryFixedWindowRateLimiter", "RateLimitResult"]
