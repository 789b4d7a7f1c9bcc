"""GitHub profile fetcher."""

from __future__ import annotations

from collections import Counter
from typing import Any
from urllib.parse import quote

import httpx

from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.core.errors import ProfileNotFoundError, UpstreamAppError

TOP_LANGUAGES = 5


class GitHubFetcher(AbstractProfileFetcher):
    """Summarizes a GitHub user and their public repositories.

    Uses the REST API (``/users/{u}`` and ``/users/{u}/repos``). A token is
    optional and only raises the upstream quota.
    """

    platform = "github"

    def __init__(
        self,
        *,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout_seconds=timeout_seconds, transport=transport)
        self._token = token

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json", "User-Agent": "prepgate"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def fetch(self, username: str) -> dict[str, Any]:
        handle = quote(username, safe="")
        try:
            async with self._client(self._headers()) as client:
                user_resp = await client.get(f"/users/{handle}")
                if user_resp.status_code == 404:
                    raise ProfileNotFoundError(
                        code="profile_not_found",
                        message=f"GitHub user '{username}' not found",
                        details={"platform": self.platform, "username": username},
                    )
                if not user_resp.is_success:
                    raise UpstreamAppError(
                        code="upstream_error",
                        message="GitHub API request failed",
                        details={"platform": self.platform, "upstream_status": user_resp.status_code},
                    )

                repos_resp = await client.get(
                    f"/users/{handle}/repos",
                    params={"per_page": 100, "sort": "updated"},
                )
                user = user_resp.json()
                # Repos are best-effort; the profile is still useful without them.
                repos = repos_resp.json() if repos_resp.is_success else []
        except httpx.HTTPError as exc:
            raise UpstreamAppError(
                code="upstream_unavailable",
                message=f"GitHub API unreachable: {exc.__class__.__name__}",
                details={"platform": self.platform},
            ) from exc
        except ValueError as exc:
            raise UpstreamAppError(
                code="upstream_invalid_response",
                message="GitHub API returned invalid JSON",
                details={"platform": self.platform},
            ) from exc

        return summarize_github(user, repos if isinstance(repos, list) else [])


def summarize_github(user: dict[str, Any], repos: list[dict[str, Any]]) -> dict[str, Any]:
    """Reduce raw API payloads to the fields the profile page shows."""

    languages = Counter(r["language"] for r in repos if r.get("language"))
    return {
        "username": user.get("login") or "",
        "name": user.get("name"),
        "avatar_url": user.get("avatar_url"),
        "public_repos": user.get("public_repos", len(repos)),
        "followers": user.get("followers", 0),
        "following": user.get("following", 0),
        "total_stars": sum(r.get("stargazers_count", 0) for r in repos),
        "top_languages": [lang for lang, _ in languages.most_common(TOP_LANGUAGES)],
        "repos": [
            {
                "name": r.get("name"),
                "description": r.get("description"),
                "language": r.get("language"),
                "stars": r.get("stargazers_count", 0),
                "forks": r.get("forks_count", 0),
                "url": r.get("html_url"),
                "updated_at": r.get("updated_at"),
            }
            for r in repos
        ],
    }
