"""Appointment endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, status

from hernest.dependencies import (
    CurrentDoctor,
    CurrentPatient,
    DatabaseSession,
    SignedInSession,
)
from hernest.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    PaymentRequest,
    PaymentResponse,
)
from hernest.services.appointment_service import AppointmentService

router = APIRouter()


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
)
async def book_appointment(
    data: AppointmentCreate,
    session: SignedInSession,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Book an appointment with a doctor.

    Doctor, date, time slot and the caller's profile must all be present;
    otherwise nothing is written and 422 is returned.

    Args:
        data: Selected doctor, date and time slot
        session: Signed-in session of the booking patient
        db: Database session

    Returns:
        Created appointment, pending and unpaid
    """
    return await AppointmentService(db).book_appointment(session.profile, data)


@router.get(
    "",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List my appointments",
)
async def list_appointments(
    session: SignedInSession,
    db: DatabaseSession,
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    from_date: datetime | None = Query(None),
    to_date: datetime | None = Query(None),
) -> AppointmentListResponse:
    """
    List appointments the caller takes part in, soonest first.

    Args:
        session: Signed-in session
        db: Database session
        status_filter: Filter by status
        from_date: Earliest scheduled time
        to_date: Latest scheduled time

    Returns:
        Appointments with both parties' names
    """
    filters = AppointmentFilters(status=status_filter, from_date=from_date, to_date=to_date)
    return await AppointmentService(db).list_appointments(session.identity_id, filters)


@router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: UUID,
    session: SignedInSession,
    db: DatabaseSession,
) -> AppointmentResponse:
    """Get an appointment; only its patient and its doctor may read it."""
    return await AppointmentService(db).get_appointment(appointment_id, session.identity_id)


@router.post(
    "/{appointment_id}/confirm",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Confirm a pending appointment",
)
async def confirm_appointment(
    appointment_id: UUID,
    doctor: CurrentDoctor,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Confirm a pending appointment.

    Args:
        appointment_id: Appointment ID
        doctor: The appointment's doctor
        db: Database session

    Returns:
        Confirmed appointment
    """
    return await AppointmentService(db).confirm_appointment(appointment_id, doctor.id)


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancel a pending appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    doctor: CurrentDoctor,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Cancel a pending appointment.

    Args:
        appointment_id: Appointment ID
        doctor: The appointment's doctor
        db: Database session

    Returns:
        Cancelled appointment
    """
    return await AppointmentService(db).cancel_appointment(appointment_id, doctor.id)


@router.post(
    "/{appointment_id}/pay",
    response_model=PaymentResponse,
    status_code=status.HTTP_200_OK,
    summary="Pay for an appointment",
)
async def pay_appointment(
    appointment_id: UUID,
    card: PaymentRequest,
    patient: CurrentPatient,
    db: DatabaseSession,
) -> PaymentResponse:
    """
    Pay the consultation fee with a (simulated) card.

    A successful payment also confirms the appointment. Card details are
    validated and never stored.

    Args:
        appointment_id: Appointment ID
        card: Card details
        patient: The appointment's patient
        db: Database session

    Returns:
        Updated appointment and amount charged
    """
    return await AppointmentService(db).pay_appointment(appointment_id, patient.id, card)
