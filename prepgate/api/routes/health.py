from __future__ import annotations

from fastapi import APIRouter

from prepgate.core.cache import get_response_cache
from prepgate.core.rate_limit import get_rate_limiter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check with a glance at in-process state.

    Neither rate limited nor cached. Reports cache counters and the number
    of tracked limiter keys so unbounded growth is visible from outside.
    """

    return {
        "status": "ok",
        "cache": get_response_cache().stats(),
        "rate_limiter": {"keys": len(get_rate_limiter())},
    }
