"""Helpers shared by fetchers that read public HTML profile pages.

These platforms have no stable public API, so their summaries are
best-effort: a selector that matches nothing yields ``None`` rather than an
error. Only transport failures and non-2xx pages fail a lookup.
"""

from __future__ import annotations

import re
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from prepgate.core.errors import ProfileNotFoundError, UpstreamAppError

HTML_HEADERS = {"Accept": "text/html", "User-Agent": "prepgate"}

_INT_RE = re.compile(r"(\d[\d,]*)")


def first_int(text: str | None) -> int | None:
    """Return the first integer in ``text`` (``"1,234 solved"`` -> 1234)."""
    if not text:
        return None
    match = _INT_RE.search(text)
    return int(match.group(1).replace(",", "")) if match else None


def select_text(soup: BeautifulSoup, selector: str) -> str:
    """Text of the first element matching the CSS ``selector``, or ``""``."""
    node = soup.select_one(selector)
    return node.get_text(" ", strip=True) if node is not None else ""


def search_int(pattern: str, text: str) -> int | None:
    """Integer captured by the first group of ``pattern`` (case-insensitive)."""
    match = re.search(pattern, text, re.IGNORECASE)
    return first_int(match.group(1)) if match else None


async def get_profile_page(
    client: httpx.AsyncClient,
    path: str,
    *,
    platform: str,
    username: str,
) -> BeautifulSoup:
    """GET ``path`` and parse it.

    Raises:
        ProfileNotFoundError: The page answered 404.
        UpstreamAppError: Any other non-2xx answer or a transport failure.
    """
    try:
        response = await client.get(path)
    except httpx.HTTPError as exc:
        raise UpstreamAppError(
            code="upstream_unavailable",
            message=f"{platform} unreachable: {exc.__class__.__name__}",
            details={"platform": platform},
        ) from exc

    if response.status_code == 404:
        raise ProfileNotFoundError(
            code="profile_not_found",
            message=f"{platform} user '{username}' not found",
            details={"platform": platform, "username": username},
        )
    if not response.is_success:
        raise UpstreamAppError(
            code="upstream_error",
            message=f"{platform} request failed",
            details={"platform": platform, "upstream_status": response.status_code},
        )
    return BeautifulSoup(response.text, "html.parser")


def quote_handle(username: str) -> str:
    return quote(username, safe="")
