"""Dashboard view models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, field_serializer

from hernest.schemas.appointments import AppointmentResponse
from hernest.schemas.period_logs import PeriodLogResponse


class DoctorStats(BaseModel):
    """Aggregates derived from a doctor's appointments."""

    total_patients: int = 0
    total_earnings: Decimal = Decimal("0")
    pending_appointments: int = 0

    @field_serializer("total_earnings", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)


class DoctorDashboardResponse(BaseModel):
    """Doctor dashboard: today's and upcoming appointments plus stats."""

    today: list[AppointmentResponse]
    upcoming: list[AppointmentResponse]
    stats: DoctorStats


class PatientDashboardResponse(BaseModel):
    """Patient dashboard: cycle tracking and appointments."""

    period_logs: list[PeriodLogResponse]
    logged_dates: list[date]
    appointments: list[AppointmentResponse]
    last_period_date: date | None = None
    cycle_length: int | None = None
