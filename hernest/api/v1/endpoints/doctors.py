"""Doctor directory and availability endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from hernest.dependencies import CacheManagerDep, DatabaseSession, SignedInSession
from hernest.schemas.availability import AvailabilityResponse
from hernest.schemas.profiles import DoctorProfile, DoctorSummary
from hernest.services.availability_service import AvailabilityService
from hernest.services.profile_service import ProfileService

router = APIRouter()


@router.get(
    "",
    response_model=list[DoctorSummary],
    status_code=status.HTTP_200_OK,
    summary="List doctors",
)
async def list_doctors(
    _: SignedInSession,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
    specialization: str | None = Query(None, description="Filter by specialization"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> list[DoctorSummary]:
    """
    List doctor profiles by name.

    Args:
        db: Database session
        cache_manager: Cache manager
        specialization: Case-insensitive specialization filter
        skip: Number of records to skip
        limit: Maximum number of records

    Returns:
        Doctor directory entries
    """
    rows = await ProfileService(cache_manager).list_doctors(db, specialization, skip, limit)
    return [DoctorSummary.model_validate(row) for row in rows]


@router.get(
    "/{doctor_id}",
    response_model=DoctorProfile,
    status_code=status.HTTP_200_OK,
    summary="Get doctor by ID",
)
async def get_doctor(
    doctor_id: UUID,
    _: SignedInSession,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> DoctorProfile:
    """Get a doctor's profile; 404 when the ID is not a doctor."""
    return await ProfileService(cache_manager).get_doctor(db, doctor_id)


@router.get(
    "/{doctor_id}/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
    summary="Get bookable dates and slots",
)
async def get_availability(
    doctor_id: UUID,
    _: SignedInSession,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> AvailabilityResponse:
    """
    Get the booking grid for a doctor.

    The grid covers the next seven days with every slot offered on each
    enabled date, regardless of existing bookings.

    Args:
        doctor_id: Doctor profile ID
        db: Database session
        cache_manager: Cache manager

    Returns:
        Availability grid with the doctor's fee
    """
    return await AvailabilityService(cache_manager).get_availability(db, doctor_id)
