"""Prescription service for business logic."""

from datetime import timedelta
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.config import settings
from hernest.core.clock import utcnow
from hernest.core.exceptions import ForbiddenException, NotFoundException
from hernest.models.appointments import appointments
from hernest.models.prescriptions import prescriptions
from hernest.schemas.prescriptions import PrescriptionCreate, PrescriptionResponse
from hernest.services.appointment_service import doctor_profiles, patient_profiles

logger = structlog.get_logger(__name__)


def prescription_select():
    """Select prescriptions with both parties' names and the visit time."""
    return select(
        prescriptions,
        doctor_profiles.c.full_name.label("doctor_name"),
        patient_profiles.c.full_name.label("patient_name"),
        appointments.c.scheduled_for.label("appointment_scheduled_for"),
    ).select_from(
        prescriptions.outerjoin(doctor_profiles, prescriptions.c.doctor_id == doctor_profiles.c.id)
        .outerjoin(patient_profiles, prescriptions.c.patient_id == patient_profiles.c.id)
        .outerjoin(appointments, prescriptions.c.appointment_id == appointments.c.id)
    )


class PrescriptionService:
    """Service for issuing and listing prescriptions."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _fetch_row(self, prescription_id: UUID) -> dict[str, Any]:
        result = await self.db.execute(
            prescription_select().where(prescriptions.c.id == prescription_id)
        )
        return dict(result.mappings().one())

    async def create_prescription(
        self,
        doctor_id: UUID,
        data: PrescriptionCreate,
    ) -> PrescriptionResponse:
        """
        Issue a prescription for one of the doctor's appointments.

        The patient is the appointment's patient.

        Args:
            doctor_id: ID of the issuing doctor
            data: Appointment, medications and instructions

        Returns:
            Created prescription

        Raises:
            NotFoundException: If the appointment does not exist
            ForbiddenException: If the appointment belongs to another doctor
        """
        result = await self.db.execute(
            select(appointments.c.doctor_id, appointments.c.patient_id).where(
                appointments.c.id == data.appointment_id
            )
        )
        appointment = result.mappings().first()

        if not appointment:
            raise NotFoundException("Appointment not found")

        if appointment["doctor_id"] != doctor_id:
            raise ForbiddenException("You can only prescribe for your own appointments")

        issued_at = utcnow()
        stmt = (
            insert(prescriptions)
            .values(
                appointment_id=data.appointment_id,
                doctor_id=doctor_id,
                patient_id=appointment["patient_id"],
                medications=[m.model_dump() for m in data.medications],
                instructions=data.instructions,
                created_at=issued_at,
                valid_until=issued_at + timedelta(days=settings.prescription_validity_days),
            )
            .returning(prescriptions.c.id)
        )
        result = await self.db.execute(stmt)
        prescription_id = result.scalar_one()
        await self.db.commit()

        logger.info(
            "prescription_issued",
            prescription_id=str(prescription_id),
            appointment_id=str(data.appointment_id),
            doctor_id=str(doctor_id),
            medication_count=len(data.medications),
        )

        return PrescriptionResponse.model_validate(await self._fetch_row(prescription_id))

    async def list_prescriptions(self, user_id: UUID) -> list[PrescriptionResponse]:
        """List prescriptions the user issued or received, newest first."""
        stmt = (
            prescription_select()
            .where(
                or_(
                    prescriptions.c.doctor_id == user_id,
                    prescriptions.c.patient_id == user_id,
                )
            )
            .order_by(prescriptions.c.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [PrescriptionResponse.model_validate(dict(row)) for row in result.mappings().all()]
