"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``prepgate`` import so the global
settings object is built from test values, not from a local .env file.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("APP_RATE_LIMIT_INCLUDE_HEADERS", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("EXTERNAL_GITHUB_API_URL", "https://github.test")
os.environ.setdefault("EXTERNAL_CODEFORCES_API_URL", "https://codeforces.test/api")
os.environ.setdefault("EXTERNAL_CODECHEF_API_URL", "https://codechef-api.test")
os.environ.setdefault("EXTERNAL_CODECHEF_URL", "https://codechef.test")
os.environ.setdefault("EXTERNAL_HACKERRANK_URL", "https://hackerrank.test")
os.environ.setdefault("EXTERNAL_HACKEREARTH_URL", "https://hackerearth.test")

import pytest  # noqa: E402

from prepgate.core.cache import reset_response_cache  # noqa: E402
from prepgate.core.rate_limit import reset_rate_limiter  # noqa: E402


class FakeClock:
    """Deterministic millisecond clock for limiter and cache tests."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, ms: float) -> None:
        self.current += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolate_shared_state():
    """Every test starts with an empty process-wide limiter and cache."""
    reset_rate_limiter()
    reset_response_cache()
    yield
    reset_rate_limiter()
    reset_response_cache()
