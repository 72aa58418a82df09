# src/talent_connect/api/v1/endpoints/profiles.py
"""Profile directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from talent_connect.api.v1.dependencies import CurrentUserDep, SessionDep
from talent_connect.schemas.profile import OwnProfileResponse, ProfileResponse, ProfileUpdate
from talent_connect.services import profiles

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=OwnProfileResponse)
async def read_own_profile(current_user: CurrentUserDep) -> OwnProfileResponse:
    """Return the caller's profile, provisioning it on first use."""
    return OwnProfileResponse.model_validate(current_user)


@router.put("/me", response_model=OwnProfileResponse)
async def update_own_profile(
    update_data: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> OwnProfileResponse:
    """Update the caller's profile fields."""
    profile = profiles.update_profile(db, current_user, update_data)
    return OwnProfileResponse.model_validate(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def read_profile(
    profile_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Return another user's public profile."""
    return ProfileResponse.model_validate(profiles.get_profile(db, profile_id))
