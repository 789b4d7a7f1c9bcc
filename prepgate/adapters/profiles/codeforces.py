"""Codeforces profile fetcher."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.core.errors import ProfileNotFoundError, UpstreamAppError

logger = logging.getLogger(__name__)


class CodeforcesFetcher(AbstractProfileFetcher):
    """Summarizes a Codeforces handle from three API calls.

    ``user.info``, ``user.status`` and ``user.rating`` are requested
    concurrently; any of them may fail without failing the lookup, in which
    case the affected fields fall back to zero/"unrated".
    """

    platform = "codeforces"

    def __init__(
        self,
        *,
        base_url: str = "https://codeforces.com/api",
        timeout_seconds: float = 15.0,
        submissions_timeout_seconds: float = 25.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout_seconds=timeout_seconds, transport=transport)
        self.submissions_timeout_seconds = submissions_timeout_seconds

    async def fetch(self, username: str) -> dict[str, Any]:
        async with self._client() as client:
            info_res, status_res, rating_res = await asyncio.gather(
                client.get("/user.info", params={"handles": username}),
                client.get(
                    "/user.status",
                    params={"handle": username, "from": 1, "count": 10000},
                    timeout=self.submissions_timeout_seconds,
                ),
                client.get("/user.rating", params={"handle": username}),
                return_exceptions=True,
            )

        responses = {"info": info_res, "status": status_res, "rating": rating_res}
        if all(isinstance(r, BaseException) for r in responses.values()):
            raise UpstreamAppError(
                code="upstream_unavailable",
                message="Codeforces API unreachable",
                details={"platform": self.platform},
            )

        payloads: dict[str, Any] = {}
        for name, response in responses.items():
            if isinstance(response, BaseException):
                if not isinstance(response, Exception):
                    raise response
                logger.warning(
                    "codeforces.partial_failure",
                    extra={"call": name, "error_type": type(response).__name__},
                )
                continue
            payloads[name] = self._result_of(name, response, username)

        info_list = payloads.get("info") or []
        info = info_list[0] if info_list else {}
        return summarize_codeforces(
            username,
            info,
            payloads.get("status") or [],
            payloads.get("rating") or [],
        )

    def _result_of(self, name: str, response: httpx.Response, username: str) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            logger.warning("codeforces.invalid_json", extra={"call": name})
            return None

        if response.is_success and body.get("status") == "OK":
            return body.get("result")

        comment = str(body.get("comment", ""))
        if name == "info" and "not found" in comment.lower():
            raise ProfileNotFoundError(
                code="profile_not_found",
                message=f"Codeforces handle '{username}' not found",
                details={"platform": self.platform, "username": username},
            )
        logger.warning(
            "codeforces.call_failed",
            extra={"call": name, "upstream_status": response.status_code, "comment": comment},
        )
        return None


def summarize_codeforces(
    username: str,
    info: dict[str, Any],
    submissions: list[dict[str, Any]],
    rating_history: list[dict[str, Any]],
) -> dict[str, Any]:
    """Collapse raw API results into the public profile summary.

    A problem counts as solved once, however many accepted submissions it has.
    """

    solved = {
        (s["problem"].get("contestId"), s["problem"].get("index"))
        for s in submissions
        if s.get("verdict") == "OK" and isinstance(s.get("problem"), dict)
    }
    return {
        "username": info.get("handle") or username,
        "rating": info.get("rating", 0),
        "max_rating": info.get("maxRating", 0),
        "rank": info.get("rank", "unrated"),
        "problems_solved": len(solved),
        "contests": len(rating_history),
    }
