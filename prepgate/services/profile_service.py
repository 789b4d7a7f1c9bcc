"""Cache-aside lookups of external coding profiles.

Admission control happens before this service is reached (route
dependency); here a lookup is:
1. normalize and validate the username
2. return the cached summary if one is still live
3. otherwise fetch upstream and cache the summary for ``ttl_ms``

Two concurrent misses for the same user both fetch; the later ``set`` wins.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Mapping

from prepgate.adapters.cache.base import AbstractResponseCache
from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.core.errors import ValidationAppError
from prepgate.utils.keys import build_key

logger = logging.getLogger(__name__)

MAX_USERNAME_CHARS = 64
_USERNAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


def normalize_username(username: str) -> str:
    """Strip and validate a platform handle.

    Raises:
        ValidationAppError: If the handle is empty, too long or has
            characters no supported platform allows.
    """
    cleaned = (username or "").strip()
    if not cleaned:
        raise ValidationAppError(code="username_required", message="username required")
    if len(cleaned) > MAX_USERNAME_CHARS or not _USERNAME_RE.match(cleaned):
        raise ValidationAppError(
            code="username_invalid",
            message="username contains unsupported characters or is too long",
            details={"hint": f"Use at most {MAX_USERNAME_CHARS} of [A-Za-z0-9._-]"},
        )
    return cleaned


class ProfileLookupService:
    """Memoizes upstream profile summaries per platform and username."""

    def __init__(
        self,
        *,
        fetchers: Mapping[str, AbstractProfileFetcher],
        cache: AbstractResponseCache[dict[str, Any]],
        ttl_ms: int,
    ) -> None:
        self.fetchers = dict(fetchers)
        self.cache = cache
        self.ttl_ms = ttl_ms

    @staticmethod
    def cache_key(platform: str, username: str) -> str:
        return build_key("external", platform, username.lower())

    async def lookup(self, platform: str, username: str) -> tuple[dict[str, Any], bool]:
        """Return ``(summary, cached)`` for ``username`` on ``platform``.

        Raises:
            ValidationAppError: Unknown platform or malformed username.
            ProfileNotFoundError: Upstream has no such user (not cached).
            UpstreamAppError: Upstream failure (not cached).
        """
        fetcher = self.fetchers.get(platform)
        if fetcher is None:
            raise ValidationAppError(
                code="platform_unsupported",
                message=f"Unsupported platform: '{platform}'",
                details={"platform": platform},
            )

        handle = normalize_username(username)
        key = self.cache_key(platform, handle)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("profile.lookup", extra={"platform": platform, "cached": True})
            return cached, True

        start = time.perf_counter()
        summary = await fetcher.fetch(handle)
        self.cache.set(key, summary, self.ttl_ms)

        logger.info(
            "profile.lookup",
            extra={
                "platform": platform,
                "cached": False,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return summary, False
