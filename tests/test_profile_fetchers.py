"""Tests for upstream profile fetchers using httpx.MockTransport."""

import httpx
import pytest

from prepgate.adapters.profiles.codechef import CodeChefFetcher
from prepgate.adapters.profiles.codeforces import CodeforcesFetcher, summarize_codeforces
from prepgate.adapters.profiles.factory import create_profile_fetchers
from prepgate.adapters.profiles.github import GitHubFetcher
from prepgate.adapters.profiles.hackerearth import HackerEarthFetcher
from prepgate.adapters.profiles.hackerrank import HackerRankFetcher
from prepgate.adapters.profiles.html import first_int
from prepgate.core.errors import ProfileNotFoundError, UpstreamAppError

GITHUB_USER = {
    "login": "octocat",
    "name": "The Octocat",
    "avatar_url": "https://avatars.test/octocat",
    "public_repos": 3,
    "followers": 100,
    "following": 1,
}
GITHUB_REPOS = [
    {"name": "a", "language": "Python", "stargazers_count": 5, "forks_count": 1},
    {"name": "b", "language": "Python", "stargazers_count": 2, "forks_count": 0},
    {"name": "c", "language": "Go", "stargazers_count": 1, "forks_count": 0},
]


def _github(handler) -> GitHubFetcher:
    return GitHubFetcher(base_url="https://github.test", transport=httpx.MockTransport(handler))


def _codeforces(handler) -> CodeforcesFetcher:
    return CodeforcesFetcher(base_url="https://codeforces.test/api", transport=httpx.MockTransport(handler))


class TestGitHubFetcher:
    @pytest.mark.asyncio
    async def test_summarizes_user_and_repos(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            if request.url.path == "/users/octocat":
                return httpx.Response(200, json=GITHUB_USER)
            assert request.url.params["per_page"] == "100"
            return httpx.Response(200, json=GITHUB_REPOS)

        summary = await _github(handler).fetch("octocat")

        assert seen == ["/users/octocat", "/users/octocat/repos"]
        assert summary["username"] == "octocat"
        assert summary["total_stars"] == 8
        assert summary["top_languages"] == ["Python", "Go"]
        assert len(summary["repos"]) == 3

    @pytest.mark.asyncio
    async def test_sends_token_when_configured(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer t0ken"
            return httpx.Response(200, json=GITHUB_USER if request.url.path.endswith("octocat") else [])

        fetcher = GitHubFetcher(
            base_url="https://github.test",
            token="t0ken",
            transport=httpx.MockTransport(handler),
        )
        summary = await fetcher.fetch("octocat")

        assert summary["total_stars"] == 0

    @pytest.mark.asyncio
    async def test_missing_user_raises_not_found(self) -> None:
        with pytest.raises(ProfileNotFoundError):
            await _github(lambda request: httpx.Response(404, json={"message": "Not Found"})).fetch("ghost")

    @pytest.mark.asyncio
    async def test_upstream_error_status(self) -> None:
        with pytest.raises(UpstreamAppError) as exc_info:
            await _github(lambda request: httpx.Response(503)).fetch("octocat")

        assert exc_info.value.details["upstream_status"] == 503

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        with pytest.raises(UpstreamAppError) as exc_info:
            await _github(handler).fetch("octocat")

        assert exc_info.value.code == "upstream_unavailable"

    @pytest.mark.asyncio
    async def test_repos_failure_is_tolerated(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/users/octocat":
                return httpx.Response(200, json=GITHUB_USER)
            return httpx.Response(500)

        summary = await _github(handler).fetch("octocat")

        assert summary["repos"] == []
        assert summary["public_repos"] == 3


class TestCodeforcesFetcher:
    @pytest.mark.asyncio
    async def test_combines_three_calls(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path.endswith("user.info"):
                return httpx.Response(
                    200,
                    json={"status": "OK", "result": [{"handle": "tourist", "rating": 3800, "maxRating": 4000, "rank": "legendary grandmaster"}]},
                )
            if path.endswith("user.status"):
                return httpx.Response(
                    200,
                    json={
                        "status": "OK",
                        "result": [
                            {"verdict": "OK", "problem": {"contestId": 1, "index": "A"}},
                            {"verdict": "OK", "problem": {"contestId": 1, "index": "A"}},
                            {"verdict": "WRONG_ANSWER", "problem": {"contestId": 1, "index": "B"}},
                            {"verdict": "OK", "problem": {"contestId": 2, "index": "B"}},
                        ],
                    },
                )
            return httpx.Response(200, json={"status": "OK", "result": [{}, {}, {}]})

        summary = await _codeforces(handler).fetch("tourist")

        assert summary == {
            "username": "tourist",
            "rating": 3800,
            "max_rating": 4000,
            "rank": "legendary grandmaster",
            "problems_solved": 2,
            "contests": 3,
        }

    @pytest.mark.asyncio
    async def test_partial_failure_falls_back_to_defaults(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("user.status"):
                raise httpx.ReadTimeout("slow", request=request)
            if request.url.path.endswith("user.rating"):
                return httpx.Response(503, text="unavailable")
            return httpx.Response(200, json={"status": "OK", "result": [{"handle": "newbie"}]})

        summary = await _codeforces(handler).fetch("newbie")

        assert summary["rating"] == 0
        assert summary["rank"] == "unrated"
        assert summary["problems_solved"] == 0
        assert summary["contests"] == 0

    @pytest.mark.asyncio
    async def test_unknown_handle_raises_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={"status": "FAILED", "comment": "handles: User with handle ghost not found"},
            )

        with pytest.raises(ProfileNotFoundError):
            await _codeforces(handler).fetch("ghost")

    @pytest.mark.asyncio
    async def test_all_calls_failing_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(UpstreamAppError):
            await _codeforces(handler).fetch("tourist")


def test_summarize_codeforces_uses_requested_handle_without_info() -> None:
    summary = summarize_codeforces("someone", {}, [], [])

    assert summary["username"] == "someone"
    assert summary["rank"] == "unrated"


CODECHEF_PAGE = """
<html><body>
  <div class="rating-header"><div class="rating-number">1,834</div></div>
  <section class="rating-data-section problems-solved">
    <h3>Fully Solved (212)</h3>
  </section>
</body></html>
"""

HACKERRANK_PAGE = """
<html><body>
  <div class="hr-problems-solved">Problems Solved: 1,024</div>
  <div class="badge-card">Python</div>
  <div class="badge-card">  Problem Solving </div>
  <div class="badge-card"></div>
</body></html>
"""


def _codechef(handler) -> CodeChefFetcher:
    return CodeChefFetcher(
        base_url="https://codechef.test",
        api_url="https://codechef-api.test",
        transport=httpx.MockTransport(handler),
    )


class TestCodeChefFetcher:
    @pytest.mark.asyncio
    async def test_uses_json_api_when_available(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == "codechef-api.test"
            assert request.url.path == "/handle/chef"
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "currentRating": 1834,
                    "stars": "3★",
                    "globalRank": 4521,
                    "fullysolvedcount": 212,
                },
            )

        summary = await _codechef(handler).fetch("chef")

        assert summary == {
            "username": "chef",
            "rating": 1834,
            "stars": "3★",
            "global_rank": 4521,
            "problems_solved": 212,
            "source": "api",
        }

    @pytest.mark.asyncio
    async def test_api_reporting_failure_means_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": False})

        with pytest.raises(ProfileNotFoundError):
            await _codechef(handler).fetch("ghost")

    @pytest.mark.asyncio
    async def test_falls_back_to_profile_page(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.host)
            if request.url.host == "codechef-api.test":
                raise httpx.ConnectError("down", request=request)
            assert request.url.path == "/users/chef"
            assert request.headers["Accept"] == "text/html"
            return httpx.Response(200, text=CODECHEF_PAGE)

        summary = await _codechef(handler).fetch("chef")

        assert seen == ["codechef-api.test", "codechef.test"]
        assert summary["rating"] == 1834
        assert summary["problems_solved"] == 212
        assert summary["source"] == "html"

    @pytest.mark.asyncio
    async def test_page_without_markup_uses_text_search(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "codechef-api.test":
                return httpx.Response(500, text="oops")
            return httpx.Response(200, text="<p>Rating 1500</p><p>Fully Solved: 1,001</p>")

        summary = await _codechef(handler).fetch("chef")

        assert summary["rating"] == 1500
        assert summary["problems_solved"] == 1001

    @pytest.mark.asyncio
    async def test_missing_page_raises_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "codechef-api.test":
                return httpx.Response(503)
            return httpx.Response(404)

        with pytest.raises(ProfileNotFoundError):
            await _codechef(handler).fetch("ghost")


class TestHackerRankFetcher:
    @pytest.mark.asyncio
    async def test_reads_solved_count_and_badges(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/coder"
            return httpx.Response(200, text=HACKERRANK_PAGE)

        fetcher = HackerRankFetcher(base_url="https://hackerrank.test", transport=httpx.MockTransport(handler))
        summary = await fetcher.fetch("coder")

        assert summary == {
            "username": "coder",
            "problems_solved": 1024,
            "badges": ["Python", "Problem Solving"],
        }

    @pytest.mark.asyncio
    async def test_unrecognized_page_yields_defaults(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html><body>redesigned</body></html>")

        fetcher = HackerRankFetcher(base_url="https://hackerrank.test", transport=httpx.MockTransport(handler))
        summary = await fetcher.fetch("coder")

        assert summary["problems_solved"] == 0
        assert summary["badges"] == []

    @pytest.mark.asyncio
    async def test_server_error_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        fetcher = HackerRankFetcher(base_url="https://hackerrank.test", transport=httpx.MockTransport(handler))
        with pytest.raises(UpstreamAppError) as exc_info:
            await fetcher.fetch("coder")
        assert exc_info.value.details["upstream_status"] == 503


class TestHackerEarthFetcher:
    @pytest.mark.asyncio
    async def test_reads_stats_from_profile_page(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/@earthling"
            return httpx.Response(
                200,
                text='<div class="problems-solved">87 solved</div><span class="rating">1642</span>',
            )

        fetcher = HackerEarthFetcher(base_url="https://hackerearth.test", transport=httpx.MockTransport(handler))
        summary = await fetcher.fetch("earthling")

        assert summary == {"username": "earthling", "problems_solved": 87, "rating": 1642}

    @pytest.mark.asyncio
    async def test_absent_stats_are_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html><body>nothing here</body></html>")

        fetcher = HackerEarthFetcher(base_url="https://hackerearth.test", transport=httpx.MockTransport(handler))
        summary = await fetcher.fetch("earthling")

        assert summary["problems_solved"] is None
        assert summary["rating"] is None

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        fetcher = HackerEarthFetcher(base_url="https://hackerearth.test", transport=httpx.MockTransport(handler))
        with pytest.raises(UpstreamAppError) as exc_info:
            await fetcher.fetch("earthling")
        assert exc_info.value.code == "upstream_unavailable"


@pytest.mark.parametrize(
    ("text", "expected"),
    [("Fully Solved (1,234)", 1234), ("no digits", None), ("", None), (None, None)],
)
def test_first_int(text, expected) -> None:
    assert first_int(text) == expected


def test_factory_builds_every_platform_from_settings() -> None:
    fetchers = create_profile_fetchers()

    assert set(fetchers) == {"github", "codeforces", "codechef", "hackerrank", "hackerearth"}
    assert fetchers["codechef"].base_url == "https://codechef.test"
    assert fetchers["codechef"].api_url == "https://codechef-api.test"
    assert fetchers["hackerearth"].timeout_seconds == 20.0
