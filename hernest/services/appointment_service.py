"""Appointment service for business logic."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.config import settings
from hernest.core.clock import clinic_today, utcnow
from hernest.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from hernest.models.appointments import appointments
from hernest.models.profiles import profiles
from hernest.schemas.appointments import (
    AppointmentAction,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    PaymentRequest,
    PaymentResponse,
    PaymentStatus,
)
from hernest.schemas.profiles import DoctorProfile, PatientProfile
from hernest.services.appointment_lifecycle import (
    DOCTOR_ACTIONS,
    PATIENT_ACTIONS,
    AppointmentState,
    allowed_actions,
    next_state,
)
from hernest.services.availability_service import combine_slot, is_date_disabled
from hernest.services.payment_service import PaymentService
from hernest.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)

doctor_profiles = profiles.alias("doctor_profiles")
patient_profiles = profiles.alias("patient_profiles")


def appointment_select():
    """Select appointments together with the names of both parties."""
    return select(
        appointments,
        doctor_profiles.c.full_name.label("doctor_name"),
        doctor_profiles.c.specialization.label("doctor_specialization"),
        patient_profiles.c.full_name.label("patient_name"),
    ).select_from(
        appointments.outerjoin(
            doctor_profiles, appointments.c.doctor_id == doctor_profiles.c.id
        ).outerjoin(patient_profiles, appointments.c.patient_id == patient_profiles.c.id)
    )


def state_of(row: dict[str, Any]) -> AppointmentState:
    """Combined state of a stored appointment."""
    return AppointmentState(
        AppointmentStatus(row["status"]),
        PaymentStatus(row["payment_status"]),
    )


def to_response(row: dict[str, Any], viewer_id: UUID | None = None) -> AppointmentResponse:
    """Build the response for an appointment as seen by ``viewer_id``.

    The doctor is offered confirm/cancel and the patient is offered pay,
    each only while the transition is allowed.
    """
    response = AppointmentResponse.model_validate(row)

    actions: frozenset[AppointmentAction] = frozenset()
    if viewer_id == response.doctor_id:
        actions = DOCTOR_ACTIONS
    elif viewer_id == response.patient_id:
        actions = PATIENT_ACTIONS

    if actions:
        response.available_actions = allowed_actions(
            state_of(row), actions, settings.allow_payment_any_status
        )

    return response


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession, payment_service: PaymentService | None = None):
        """Initialize service with database session."""
        self.db = db
        self.payment_service = payment_service or PaymentService()

    async def _fetch_row(self, appointment_id: UUID) -> dict[str, Any]:
        result = await self.db.execute(
            appointment_select().where(appointments.c.id == appointment_id)
        )
        row = result.mappings().first()

        if not row:
            raise NotFoundException("Appointment not found")

        return dict(row)

    async def book_appointment(
        self,
        patient: DoctorProfile | PatientProfile | None,
        data: AppointmentCreate,
        today: date | None = None,
    ) -> AppointmentResponse:
        """
        Book an appointment for a patient.

        Nothing is written unless every selection is present and valid.

        Args:
            patient: Profile of the booking patient, None if it could not be loaded
            data: Selected doctor, date and time slot
            today: Reference date, defaults to today in the clinic zone

        Returns:
            Created appointment in the (pending, pending) state

        Raises:
            ValidationException: If a selection is missing or not bookable
            ForbiddenException: If the caller is a doctor
            NotFoundException: If the doctor does not exist
            ConflictException: If the slot is already taken and double booking is prevented
        """
        if data.doctor_id is None or data.date is None or not data.time or patient is None:
            raise ValidationException("Please select all required fields")

        if isinstance(patient, DoctorProfile):
            raise ForbiddenException("Only patients can book appointments")

        if data.doctor_id == patient.id:
            raise ValidationException("You cannot book an appointment with yourself")

        today = today or clinic_today()
        if is_date_disabled(data.date, today):
            raise ValidationException("Selected date is not available for booking")

        scheduled_for = combine_slot(data.date, data.time)

        doctor = await ProfileService().get_doctor(self.db, data.doctor_id)

        if settings.prevent_double_booking:
            taken = await self.db.execute(
                select(appointments.c.id).where(
                    and_(
                        appointments.c.doctor_id == doctor.id,
                        appointments.c.scheduled_for == scheduled_for,
                        appointments.c.status != AppointmentStatus.CANCELLED.value,
                    )
                )
            )
            if taken.first():
                raise ConflictException("This time slot is already booked")

        initial = AppointmentState.initial()
        values = {
            "patient_id": patient.id,
            "doctor_id": doctor.id,
            "scheduled_for": scheduled_for,
            "payment_amount": doctor.consultation_fee or Decimal("0"),
            "status": initial.status.value,
            "payment_status": initial.payment_status.value,
            "notes": data.notes,
        }

        stmt = insert(appointments).values(**values).returning(appointments.c.id)
        result = await self.db.execute(stmt)
        appointment_id = result.scalar_one()
        await self.db.commit()

        logger.info(
            "appointment_booked",
            appointment_id=str(appointment_id),
            doctor_id=str(doctor.id),
            patient_id=str(patient.id),
            scheduled_for=scheduled_for.isoformat(),
        )

        return to_response(await self._fetch_row(appointment_id), patient.id)

    async def get_appointment(
        self,
        appointment_id: UUID,
        user_id: UUID,
    ) -> AppointmentResponse:
        """
        Get appointment by ID.

        Args:
            appointment_id: Appointment ID
            user_id: ID of requesting user

        Returns:
            Appointment details

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If user is neither the patient nor the doctor
        """
        row = await self._fetch_row(appointment_id)

        if user_id not in (row["patient_id"], row["doctor_id"]):
            raise ForbiddenException("Access denied to this appointment")

        return to_response(row, user_id)

    async def list_appointments(
        self,
        user_id: UUID,
        filters: AppointmentFilters | None = None,
    ) -> AppointmentListResponse:
        """
        List the appointments a user takes part in, soonest first.

        Args:
            user_id: ID of requesting user (patient or doctor)
            filters: Optional status and date range

        Returns:
            List of appointments
        """
        rows = await self.fetch_rows(
            or_(appointments.c.patient_id == user_id, appointments.c.doctor_id == user_id),
            filters,
        )
        items = [to_response(row, user_id) for row in rows]
        return AppointmentListResponse(total=len(items), items=items)

    async def fetch_rows(
        self,
        condition: Any,
        filters: AppointmentFilters | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch appointment rows matching ``condition`` ordered by schedule."""
        conditions = [condition]

        if filters:
            if filters.status:
                conditions.append(appointments.c.status == filters.status.value)

            if filters.from_date:
                conditions.append(appointments.c.scheduled_for >= filters.from_date)

            if filters.to_date:
                conditions.append(appointments.c.scheduled_for <= filters.to_date)

        stmt = (
            appointment_select()
            .where(and_(*conditions))
            .order_by(appointments.c.scheduled_for.asc())
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    def _next_state(row: dict[str, Any], action: AppointmentAction) -> AppointmentState:
        current = state_of(row)
        try:
            return next_state(current, action, settings.allow_payment_any_status)
        except ConflictException:
            logger.info(
                "appointment_transition_rejected",
                appointment_id=str(row["id"]),
                action=action.value,
                status=current.status.value,
                payment_status=current.payment_status.value,
            )
            raise

    async def _transition(self, row: dict[str, Any], action: AppointmentAction) -> dict[str, Any]:
        """Apply ``action`` as a compare-and-swap on the observed state."""
        current = state_of(row)
        target = self._next_state(row, action)

        stmt = (
            update(appointments)
            .where(
                and_(
                    appointments.c.id == row["id"],
                    appointments.c.status == current.status.value,
                    appointments.c.payment_status == current.payment_status.value,
                )
            )
            .values(
                status=target.status.value,
                payment_status=target.payment_status.value,
                updated_at=utcnow(),
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount == 0:
            logger.warning(
                "appointment_transition_lost_race",
                appointment_id=str(row["id"]),
                action=action.value,
            )
            raise ConflictException("Appointment was changed by someone else; reload and retry")

        logger.info(
            "appointment_transitioned",
            appointment_id=str(row["id"]),
            action=action.value,
            from_status=current.status.value,
            to_status=target.status.value,
            payment_status=target.payment_status.value,
        )

        return await self._fetch_row(row["id"])

    async def update_status(
        self,
        appointment_id: UUID,
        doctor_id: UUID,
        action: AppointmentAction,
    ) -> AppointmentResponse:
        """
        Confirm or cancel a pending appointment.

        Args:
            appointment_id: Appointment ID
            doctor_id: ID of the acting doctor
            action: CONFIRM or CANCEL

        Returns:
            Updated appointment

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the appointment belongs to another doctor
            ConflictException: If the appointment is no longer pending
        """
        if action not in DOCTOR_ACTIONS:
            raise ValidationException(f"Doctors cannot {action.value} an appointment")

        row = await self._fetch_row(appointment_id)

        if row["doctor_id"] != doctor_id:
            raise ForbiddenException("Access denied to this appointment")

        updated = await self._transition(row, action)
        return to_response(updated, doctor_id)

    async def confirm_appointment(
        self, appointment_id: UUID, doctor_id: UUID
    ) -> AppointmentResponse:
        """Confirm a pending appointment."""
        return await self.update_status(appointment_id, doctor_id, AppointmentAction.CONFIRM)

    async def cancel_appointment(
        self, appointment_id: UUID, doctor_id: UUID
    ) -> AppointmentResponse:
        """Cancel a pending appointment."""
        return await self.update_status(appointment_id, doctor_id, AppointmentAction.CANCEL)

    async def pay_appointment(
        self,
        appointment_id: UUID,
        patient_id: UUID,
        card: PaymentRequest,
    ) -> PaymentResponse:
        """
        Pay for an appointment, which also confirms it.

        The transition is checked before the card is charged, and checked
        again against the stored state when written.

        Args:
            appointment_id: Appointment ID
            patient_id: ID of the paying patient
            card: Card details

        Returns:
            Updated appointment and amount charged

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the appointment belongs to another patient
            ConflictException: If payment is not allowed in the current state
        """
        row = await self._fetch_row(appointment_id)

        if row["patient_id"] != patient_id:
            raise ForbiddenException("Access denied to this appointment")

        self._next_state(row, AppointmentAction.PAY)

        amount = Decimal(str(row["payment_amount"]))
        await self.payment_service.charge(appointment_id, amount, card)

        updated = await self._transition(row, AppointmentAction.PAY)

        return PaymentResponse(
            appointment=to_response(updated, patient_id),
            amount_charged=amount,
        )
