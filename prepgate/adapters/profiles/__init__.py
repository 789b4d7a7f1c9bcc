"""Upstream coding-profile providers."""

from prepgate.adapters.profiles.base import AbstractProfileFetcher
from prepgate.adapters.profiles.codechef import CodeChefFetcher
from prepgate.adapters.profiles.codeforces import CodeforcesFetcher
from prepgate.adapters.profiles.factory import create_profile_fetchers
from prepgate.adapters.profiles.github import GitHubFetcher
from prepgate.adapters.profiles.hackerearth import HackerEarthFetcher
from prepgate.adapters.profiles.hackerrank import HackerRankFetcher

__all__ = [
    "AbstractProfileFetcher",
    "CodeChefFetcher",
    "CodeforcesFetcher",
    "GitHubFetcher",
    "HackerEarthFetcher",
    "HackerRankFetcher",
    "create_profile_fetchers",
]
