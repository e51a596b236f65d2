"""Dashboard view models for both roles.

Everything here is derived from the stored rows on every request.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import and_, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.clock import as_utc, clinic_date_of, clinic_today, utcnow
from hernest.models.appointments import appointments
from hernest.schemas.appointments import AppointmentResponse, AppointmentStatus, PaymentStatus
from hernest.schemas.dashboard import (
    DoctorDashboardResponse,
    DoctorStats,
    PatientDashboardResponse,
)
from hernest.schemas.profiles import DoctorProfile, PatientProfile
from hernest.services.appointment_service import AppointmentService, to_response
from hernest.services.period_log_service import PeriodLogService


def todays_appointments(
    items: list[AppointmentResponse], now: datetime
) -> list[AppointmentResponse]:
    """Appointments scheduled on the current clinic date."""
    today = clinic_today(now)
    return [item for item in items if clinic_date_of(item.scheduled_for) == today]


def upcoming_appointments(
    items: list[AppointmentResponse], now: datetime
) -> list[AppointmentResponse]:
    """Appointments scheduled strictly after ``now``."""
    now = as_utc(now)
    return [item for item in items if as_utc(item.scheduled_for) > now]


class DashboardService:
    """Service assembling dashboard view models."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def doctor_stats(self, doctor_id: UUID) -> DoctorStats:
        """Distinct patients, collected earnings and pending count for a doctor."""
        patients_result = await self.db.execute(
            select(func.count(distinct(appointments.c.patient_id))).where(
                and_(
                    appointments.c.doctor_id == doctor_id,
                    appointments.c.status != AppointmentStatus.CANCELLED.value,
                )
            )
        )

        earnings_result = await self.db.execute(
            select(func.coalesce(func.sum(appointments.c.payment_amount), 0)).where(
                and_(
                    appointments.c.doctor_id == doctor_id,
                    appointments.c.payment_status == PaymentStatus.COMPLETED.value,
                )
            )
        )

        pending_result = await self.db.execute(
            select(func.count()).where(
                and_(
                    appointments.c.doctor_id == doctor_id,
                    appointments.c.status == AppointmentStatus.PENDING.value,
                )
            )
        )

        return DoctorStats(
            total_patients=patients_result.scalar() or 0,
            total_earnings=Decimal(str(earnings_result.scalar() or 0)),
            pending_appointments=pending_result.scalar() or 0,
        )

    async def doctor_dashboard(
        self, doctor: DoctorProfile, now: datetime | None = None
    ) -> DoctorDashboardResponse:
        """
        Build the doctor dashboard.

        The today and upcoming buckets are filtered independently from the
        same list, so an appointment earlier today is only in ``today`` and a
        past appointment from another day is in neither.
        """
        now = now or utcnow()
        rows = await AppointmentService(self.db).fetch_rows(appointments.c.doctor_id == doctor.id)
        items = [to_response(row, doctor.id) for row in rows]

        return DoctorDashboardResponse(
            today=todays_appointments(items, now),
            upcoming=upcoming_appointments(items, now),
            stats=await self.doctor_stats(doctor.id),
        )

    async def patient_dashboard(
        self, patient_id: UUID, profile: PatientProfile | None = None
    ) -> PatientDashboardResponse:
        """Build the patient dashboard.

        Profile-derived fields are left empty when the profile is missing.
        """
        logs = await PeriodLogService(self.db).list_logs(patient_id)
        rows = await AppointmentService(self.db).fetch_rows(
            appointments.c.patient_id == patient_id
        )

        return PatientDashboardResponse(
            period_logs=logs,
            logged_dates=sorted({log.start_date for log in logs}),
            appointments=[to_response(row, patient_id) for row in rows],
            last_period_date=profile.last_period_date if profile else None,
            cycle_length=profile.cycle_length if profile else None,
        )
