"""Profile endpoints for the Blog Stage API."""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from blog_stage.api.v1.dependencies import CurrentSessionDep, ProfileServiceDep, service_errors
from blog_stage.schemas.profile import ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    profiles: ProfileServiceDep,
    session: CurrentSessionDep,
) -> dict[str, Any]:
    """Return the caller's profile, derived from their account if never saved."""
    with service_errors():
        return await profiles.get_or_default(session.user)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    profiles: ProfileServiceDep,
    session: CurrentSessionDep,
) -> dict[str, Any]:
    """Save the caller's profile, creating the row on first save.

    Raises:
        HTTPException: If the backend neither updated nor created a row
    """
    with service_errors():
        profile = await profiles.save_profile(session.user.id, profile_data)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile could not be saved",
        )
    return profile


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(profile_id: str, profiles: ProfileServiceDep) -> dict[str, Any]:
    """Return a public profile."""
    with service_errors():
        profile = await profiles.get_profile(profile_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile
