import logging

from fastapi import APIRouter, HTTPException, status

from symptrack.api.dependencies import Store
from symptrack.models.profile import UserProfile, UserProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get(
    "",
    response_model=UserProfile,
    summary="Get the user profile",
    description="Return the singleton profile. 404 until it has been saved once.",
)
async def get_profile(store: Store) -> UserProfile:
    profile = await store.get_user_profile()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.patch(
    "",
    response_model=UserProfile,
    summary="Update the user profile",
    description="Merge the supplied fields into the profile, creating it on first save.",
)
async def update_profile(payload: UserProfileUpdate, store: Store) -> UserProfile:
    profile = await store.update_user_profile(payload)
    logger.info(
        "Profile updated: fields=%s", sorted(payload.model_dump(exclude_unset=True))
    )
    return profile
