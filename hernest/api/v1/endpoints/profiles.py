"""Profile endpoints for the signed-in identity."""

from fastapi import APIRouter, status

from hernest.dependencies import CacheManagerDep, CurrentProfile, DatabaseSession
from hernest.schemas.profiles import DoctorProfile, PatientProfile, ProfileUpdate
from hernest.services.profile_service import ProfileService

router = APIRouter()


@router.get(
    "/me",
    response_model=DoctorProfile | PatientProfile,
    status_code=status.HTTP_200_OK,
    summary="Get my profile",
)
async def get_my_profile(profile: CurrentProfile) -> DoctorProfile | PatientProfile:
    """Return the caller's profile as its role variant."""
    return profile


@router.patch(
    "/me",
    response_model=DoctorProfile | PatientProfile,
    status_code=status.HTTP_200_OK,
    summary="Update my profile",
)
async def update_my_profile(
    data: ProfileUpdate,
    profile: CurrentProfile,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> DoctorProfile | PatientProfile:
    """
    Update the caller's profile.

    Only shared fields and the caller's own role fields may be sent; a field
    of the other role is rejected with 400.

    Args:
        data: Fields to change
        profile: Caller's current profile
        db: Database session
        cache_manager: Cache manager

    Returns:
        Updated profile
    """
    return await ProfileService(cache_manager).update_profile(db, profile, data)
