"""Availability selection for the booking form.

The grid is the fixed slot template crossed with a short window of upcoming
dates. Only the date axis is filtered; existing bookings do not remove slots.
"""

from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hernest.config import settings
from hernest.core.clock import clinic_today, clinic_zone
from hernest.core.exceptions import ValidationException
from hernest.core.redis_client import CacheManager
from hernest.schemas.availability import AvailabilityDay, AvailabilityResponse
from hernest.services.profile_service import ProfileService

TIME_SLOTS: tuple[str, ...] = (
    "09:00",
    "09:30",
    "10:00",
    "10:30",
    "11:00",
    "11:30",
    "14:00",
    "14:30",
    "15:00",
    "15:30",
    "16:00",
    "16:30",
)


def booking_window(today: date, days: int | None = None) -> list[date]:
    """Dates offered for booking: tomorrow through ``today + days``."""
    days = settings.booking_window_days if days is None else days
    return [today + timedelta(days=offset) for offset in range(1, days + 1)]


def is_date_disabled(day: date, today: date, horizon_days: int | None = None) -> bool:
    """Whether ``day`` is outside the bookable range.

    Dates before tomorrow and dates more than ``horizon_days`` after today
    cannot be booked.
    """
    horizon_days = settings.booking_horizon_days if horizon_days is None else horizon_days
    return day < today + timedelta(days=1) or day > today + timedelta(days=horizon_days)


def build_availability_days(today: date) -> list[AvailabilityDay]:
    """Cross the booking window with the slot template."""
    grid = []
    for day in booking_window(today):
        disabled = is_date_disabled(day, today)
        grid.append(
            AvailabilityDay(
                date=day,
                weekday=day.strftime("%a"),
                disabled=disabled,
                slots=[] if disabled else list(TIME_SLOTS),
            )
        )
    return grid


def parse_slot(label: str) -> time:
    """
    Parse a template label into a time of day.

    Raises:
        ValidationException: If the label is not in the slot template
    """
    if label not in TIME_SLOTS:
        raise ValidationException(f"'{label}' is not a bookable time slot")
    hours, minutes = label.split(":")
    return time(int(hours), int(minutes))


def combine_slot(day: date, label: str) -> datetime:
    """Combine a date and slot label in the clinic zone into a UTC timestamp."""
    local = datetime.combine(day, parse_slot(label), tzinfo=clinic_zone())
    return local.astimezone(UTC)


class AvailabilityService:
    """Service producing the availability grid for a doctor."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.profile_service = ProfileService(cache_manager)

    async def get_availability(
        self,
        db: AsyncSession,
        doctor_id: UUID,
        today: date | None = None,
    ) -> AvailabilityResponse:
        """
        Get the bookable grid for a doctor.

        Args:
            db: Database session
            doctor_id: Doctor profile ID
            today: Reference date, defaults to today in the clinic zone

        Returns:
            Availability grid

        Raises:
            NotFoundException: If the ID is not a doctor profile
        """
        doctor = await self.profile_service.get_doctor(db, doctor_id)

        return AvailabilityResponse(
            doctor_id=doctor.id,
            doctor_name=doctor.full_name,
            consultation_fee=doctor.consultation_fee or Decimal("0"),
            days=build_availability_days(today or clinic_today()),
        )
