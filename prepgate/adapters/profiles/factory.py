"""Factory for the configured set of profile fetchers."""

from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.adapters.profiles.codechef import CodeChefFetcher
from prepgate.adapters.profiles.codeforces import CodeforcesFetcher
from prepgate.adapters.profiles.github import GitHubFetcher
from prepgate.adapters.profiles.hackerearth import HackerEarthFetcher
from prepgate.adapters.profiles.hackerrank import HackerRankFetcher
from prepgate.core.config import settings


def create_profile_fetchers() -> dict[str, AbstractProfileFetcher]:
    """Instantiate every supported fetcher from ``settings.external``.

    Returns:
        Mapping of platform name to fetcher.
    """
    external = settings.external

    fetchers: list[AbstractProfileFetcher] = [
        GitHubFetcher(
            base_url=external.github_api_url,
            token=external.github_token,
            timeout_seconds=external.timeout_seconds,
        ),
        CodeforcesFetcher(
            base_url=external.codeforces_api_url,
            timeout_seconds=external.timeout_seconds,
            submissions_timeout_seconds=external.submissions_timeout_seconds,
        ),
        CodeChefFetcher(
            base_url=external.codechef_url,
            api_url=external.codechef_api_url,
            timeout_seconds=external.scrape_timeout_seconds,
            api_timeout_seconds=external.timeout_seconds,
        ),
        HackerRankFetcher(
            base_url=external.hackerrank_url,
            timeout_seconds=external.scrape_timeout_seconds,
        ),
        HackerEarthFetcher(
            base_url=external.hackerearth_url,
            timeout_seconds=external.scrape_timeout_seconds,
        ),
    ]
    return {fetcher.platform: fetcher for fetcher in fetchers}
