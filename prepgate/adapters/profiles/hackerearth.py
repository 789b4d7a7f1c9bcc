"""HackerEarth profile fetcher (public profile page)."""

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


class HackerEarthFetcher(AbstractProfileFetcher):
    """Reads solved count and rating off ``/@{username}``.

    Either field is ``None`` when the page does not show it.
    """

    platform = "hackerearth"

    def __init__(
        self,
        *,
        base_url: str = "https://www.hackerearth.com",
        timeout_seconds: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout_seconds=timeout_seconds, transport=transport)

    async def fetch(self, username: str) -> dict[str, Any]:
        async with self._client(HTML_HEADERS) as client:
            soup = await get_profile_page(
                client,
                f"/@{quote_handle(username)}",
                platform=self.platform,
                username=username,
            )

        text = soup.get_text(" ", strip=True)
        solved = first_int(select_text(soup, "div.profile-stats, .problems-solved"))
        if solved is None:
            solved = search_int(r"Problems Solved\s*:?\s*([0-9,]+)", text)
        rating = first_int(select_text(soup, ".rating, .profile-rating"))
        if rating is None:
            rating = search_int(r"rating\s*(\d+)", text)
        return {"username": username, "problems_solved": solved, "rating": rating}
