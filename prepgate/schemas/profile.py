"""Pydantic schemas for external profile responses."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class GitHubRepo(BaseModel):
    name: str | None = None
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    url: str | None = None
    updated_at: str | None = None


class GitHubProfileResponse(BaseModel):
    """Summary of a GitHub user and their public repositories."""

    username: str = Field(..., description="GitHub login.")
    name: str | None = Field(default=None, description="Display name, if set.")
    avatar_url: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    total_stars: int = Field(0, description="Stars summed across listed repositories.")
    top_languages: List[str] = Field(
        default_factory=list,
        description="Most frequent primary languages, most common first.",
    )
    repos: List[GitHubRepo] = Field(default_factory=list)
    cached: bool = Field(False, description="True when served from the response cache.")


class CodeforcesProfileResponse(BaseModel):
    """Summary of a Codeforces handle."""

    username: str = Field(..., description="Codeforces handle.")
    rating: int = 0
    max_rating: int = 0
    rank: str = Field("unrated", description="Current rank title.")
    problems_solved: int = Field(0, description="Distinct problems with an accepted submission.")
    contests: int = Field(0, description="Rated contests participated in.")
    cached: bool = Field(False, description="True when served from the response cache.")


class CodeChefProfileResponse(BaseModel):
    """Summary of a CodeChef user."""

    username: str
    rating: int = 0
    stars: str | None = Field(default=None, description="Star band, when the JSON API reports it.")
    global_rank: int | None = None
    problems_solved: int = Field(0, description="Fully solved problems.")
    source: str = Field("api", description="'api' or 'html', whichever answered.")
    cached: bool = Field(False, description="True when served from the response cache.")


class HackerRankProfileResponse(BaseModel):
    """Best-effort summary read from a public HackerRank profile page."""

    username: str
    problems_solved: int = 0
    badges: List[str] = Field(default_factory=list, description="Badge titles shown on the profile.")
    cached: bool = Field(False, description="True when served from the response cache.")


class HackerEarthProfileResponse(BaseModel):
    """Best-effort summary read from a public HackerEarth profile page."""

    username: str
    problems_solved: int | None = Field(default=None, description="Null when the page does not show it.")
    rating: int | None = Field(default=None, description="Null when the page does not show it.")
    cached: bool = Field(False, description="True when served from the response cache.")


class RateLimitErrorResponse(BaseModel):
    """Body returned with HTTP 429."""

    error: str = Field("rate limit", examples=["rate limit"])
