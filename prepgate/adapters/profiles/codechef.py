"""CodeChef profile fetcher."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup

from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.adapters.profiles.html import (
    HTML_HEADERS,
    first_int,
    get_profile_page,
    quote_handle,
    search_int,
    select_text,
)
from prepgate.core.errors import ProfileNotFoundError

logger = logging.getLogger(__name__)


class CodeChefFetcher(AbstractProfileFetcher):
    """Summarizes a CodeChef user.

    The community JSON API is tried first. When it is unreachable or answers
    anything but a usable JSON body, the public profile page is read instead.
    ``source`` in the summary says which one answered.
    """

    platform = "codechef"

    def __init__(
        self,
        *,
        base_url: str = "https://www.codechef.com",
        api_url: str = "https://codechef-api.vercel.app",
        timeout_seconds: float = 20.0,
        api_timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout_seconds=timeout_seconds, transport=transport)
        self.api_url = api_url.rstrip("/")
        self.api_timeout_seconds = api_timeout_seconds

    async def fetch(self, username: str) -> dict[str, Any]:
        summary = await self._fetch_api(username)
        if summary is not None:
            return summary

        async with self._client(HTML_HEADERS) as client:
            soup = await get_profile_page(
                client,
                f"/users/{quote_handle(username)}",
                platform=self.platform,
                username=username,
            )
        return summarize_codechef_page(username, soup)

    async def _fetch_api(self, username: str) -> dict[str, Any] | None:
        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.api_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(f"/handle/{quote_handle(username)}")
            body = response.json() if response.is_success else None
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("codechef.api_failed", extra={"error_type": type(exc).__name__})
            return None

        if not isinstance(body, dict):
            logger.warning("codechef.api_unusable", extra={"upstream_status": response.status_code})
            return None
        if body.get("success") is False:
            raise ProfileNotFoundError(
                code="profile_not_found",
                message=f"CodeChef user '{username}' not found",
                details={"platform": self.platform, "username": username},
            )
        return {
            "username": username,
            "rating": body.get("currentRating") or 0,
            "stars": str(body["stars"]) if body.get("stars") else None,
            "global_rank": first_int(str(body.get("globalRank") or "")),
            "problems_solved": body.get("fullysolvedcount") or 0,
            "source": "api",
        }


def summarize_codechef_page(username: str, soup: BeautifulSoup) -> dict[str, Any]:
    """Read rating and solved count off a profile page, falling back to text search."""

    text = soup.get_text(" ", strip=True)
    rating = first_int(select_text(soup, ".rating-number"))
    if rating is None:
        rating = search_int(r"rating\s*([0-9]+)", text)
    solved = first_int(select_text(soup, "section.problems-solved, .problems-solved"))
    if solved is None:
        solved = search_int(r"Fully Solved\s*:?\s*\(?([0-9,]+)", text)
    return {
        "username": username,
        "rating": rating or 0,
        "stars": None,
        "global_rank": None,
        "problems_solved": solved or 0,
        "source": "html",
    }
