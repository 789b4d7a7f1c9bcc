"""HackerRank profile fetcher (public profile page)."""

from __future__ import annotations

from typing import Any

import httpx

from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.adapters.profiles.html import (
    HTML_HEADERS,
    first_int,
    get_profile_page,
    quote_handle,
    search_int,
    select_text,
)


class HackerRankFetcher(AbstractProfileFetcher):
    platform = "hackerrank"

    def __init__(
        self,
        *,
        base_url: str = "https://www.hackerrank.com",
        timeout_seconds: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout_seconds=timeout_seconds, transport=transport)

    async def fetch(self, username: str) -> dict[str, Any]:
        async with self._client(HTML_HEADERS) as client:
            soup = await get_profile_page(
                client,
                f"/{quote_handle(username)}",
                platform=self.platform,
                username=username,
            )

        solved = first_int(
            select_text(soup, "div.hr-problems-solved, .problems-solved, .challenge-solved-count")
        )
        if solved is None:
            solved = search_int(r"Problems Solved\s*:?\s*([0-9,]+)", soup.get_text(" ", strip=True))
        badges = [
            badge
            for badge in (node.get_text(" ", strip=True) for node in soup.select(".badge-card"))
            if badge
        ]
        return {"username": username, "problems_solved": solved or 0, "badges": badges}
