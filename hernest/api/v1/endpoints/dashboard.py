"""Dashboard endpoints."""

from fastapi import APIRouter, HTTPException, status

from hernest.dependencies import CurrentDoctor, DatabaseSession, SignedInSession
from hernest.schemas.dashboard import DoctorDashboardResponse, PatientDashboardResponse
from hernest.services.dashboard_service import DashboardService

router = APIRouter()


@router.get(
    "/doctor",
    response_model=DoctorDashboardResponse,
    status_code=status.HTTP_200_OK,
    summary="Doctor dashboard",
)
async def doctor_dashboard(doctor: CurrentDoctor, db: DatabaseSession) -> DoctorDashboardResponse:
    """Today's and upcoming appointments with stats, recomputed on every request."""
    return await DashboardService(db).doctor_dashboard(doctor)


@router.get(
    "/patient",
    response_model=PatientDashboardResponse,
    status_code=status.HTTP_200_OK,
    summary="Patient dashboard",
)
async def patient_dashboard(
    session: SignedInSession, db: DatabaseSession
) -> PatientDashboardResponse:
    """
    Period logs, logged dates and appointments of the caller.

    A signed-in identity whose profile could not be loaded still gets the
    patient dashboard with the profile-derived fields left empty.
    """
    if session.is_doctor:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only patients can perform this action",
        )
    return await DashboardService(db).patient_dashboard(session.identity_id, session.profile)
