from fastapi import APIRouter, Depends

from prepgate.adapters.profiles.factory import create_profile_fetchers
from prepgate.core.cache import get_response_cache
from prepgate.core.config import settings
from prepgate.core.rate_limit import rate_limited
from prepgate.schemas.profile import (
    CodeChefProfileResponse,
    CodeforcesProfileResponse,
    GitHubProfileResponse,
    HackerEarthProfileResponse,
    HackerRankProfileResponse,
    RateLimitErrorResponse,
)
from prepgate.services.profile_service import ProfileLookupService

router = APIRouter(prefix="/external", tags=["External profiles"])

_RATE_LIMITED = {429: {"model": RateLimitErrorResponse, "description": "Client is over budget"}}


def _budget(platform: str):
    """Per-client admission guard for ``platform``, read from settings on every call."""
    return Depends(
        rate_limited(
            f"external:{platform}",
            limit=lambda: getattr(settings.external, f"{platform}_limit"),
            window_ms=lambda: settings.external.window_ms,
        )
    )


def get_profile_service() -> ProfileLookupService:
    """Build the lookup service around the process-wide response cache."""
    return ProfileLookupService(
        fetchers=create_profile_fetchers(),
        cache=get_response_cache(),
        ttl_ms=settings.cache.default_ttl_ms,
    )


@router.get(
    "/github/{username}",
    response_model=GitHubProfileResponse,
    responses=_RATE_LIMITED,
    dependencies=[_budget("github")],
)
async def github_profile(
    username: str,
    service: ProfileLookupService = Depends(get_profile_service),
) -> GitHubProfileResponse:
    """Public GitHub profile summary, cached for a few minutes per username.

    Raises:
        ValidationAppError: 400 for malformed usernames.
        ProfileNotFoundError: 404 when GitHub has no such user.
        UpstreamAppError: 502 when GitHub is unavailable.
    """
    summary, cached = await service.lookup("github", username)
    return GitHubProfileResponse(**summary, cached=cached)


@router.get(
    "/codeforces/{username}",
    response_model=CodeforcesProfileResponse,
    responses=_RATE_LIMITED,
    dependencies=[_budget("codeforces")],
)
async def codeforces_profile(
    username: str,
    service: ProfileLookupService = Depends(get_profile_service),
) -> CodeforcesProfileResponse:
    """Codeforces rating, rank and solved-problem count for a handle."""
    summary, cached = await service.lookup("codeforces", username)
    return CodeforcesProfileResponse(**summary, cached=cached)


@router.get(
    "/codechef/{username}",
    response_model=CodeChefProfileResponse,
    responses=_RATE_LIMITED,
    dependencies=[_budget("codechef")],
)
async def codechef_profile(
    username: str,
    service: ProfileLookupService = Depends(get_profile_service),
) -> CodeChefProfileResponse:
    """CodeChef rating and solved count; falls back to the profile page."""
    summary, cached = await service.lookup("codechef", username)
    return CodeChefProfileResponse(**summary, cached=cached)


@router.get(
    "/hackerrank/{username}",
    response_model=HackerRankProfileResponse,
    responses=_RATE_LIMITED,
    dependencies=[_budget("hackerrank")],
)
async def hackerrank_profile(
    username: str,
    service: ProfileLookupService = Depends(get_profile_service),
) -> HackerRankProfileResponse:
    summary, cached = await service.lookup("hackerrank", username)
    return HackerRankProfileResponse(**summary, cached=cached)


@router.get(
    "/hackerearth/{username}",
    response_model=HackerEarthProfileResponse,
    responses=_RATE_LIMITED,
    dependencies=[_budget("hackerearth")],
)
async def hackerearth_profile(
    username: str,
    service: ProfileLookupService = Depends(get_profile_service),
) -> HackerEarthProfileResponse:
    summary, cached = await service.lookup("hackerearth", username)
    return HackerEarthProfileResponse(**summary, cached=cached)
