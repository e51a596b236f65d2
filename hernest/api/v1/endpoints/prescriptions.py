"""Prescription endpoints."""

from fastapi import APIRouter, status

from hernest.dependencies import CurrentDoctor, DatabaseSession, SignedInSession
from hernest.schemas.prescriptions import PrescriptionCreate, PrescriptionResponse
from hernest.services.prescription_service import PrescriptionService

router = APIRouter()


@router.post(
    "",
    response_model=PrescriptionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a prescription",
)
async def create_prescription(
    data: PrescriptionCreate,
    doctor: CurrentDoctor,
    db: DatabaseSession,
) -> PrescriptionResponse:
    """
    Issue a prescription for one of the caller's appointments.

    Args:
        data: Appointment, medications and instructions
        doctor: Issuing doctor
        db: Database session

    Returns:
        Created prescription, valid for the configured number of days
    """
    return await PrescriptionService(db).create_prescription(doctor.id, data)


@router.get(
    "",
    response_model=list[PrescriptionResponse],
    status_code=status.HTTP_200_OK,
    summary="List my prescriptions",
)
async def list_prescriptions(
    session: SignedInSession, db: DatabaseSession
) -> list[PrescriptionResponse]:
    """Prescriptions issued by or to the caller, newest first."""
    return await PrescriptionService(db).list_prescriptions(session.identity_id)
