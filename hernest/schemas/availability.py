"""Availability grid schemas."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_serializer


class AvailabilityDay(BaseModel):
    """One date of the booking window."""

    date: dt.date
    weekday: str
    disabled: bool
    slots: list[str]


class AvailabilityResponse(BaseModel):
    """Bookable dates and time slots for a doctor."""

    doctor_id: UUID
    doctor_name: str | None = None
    consultation_fee: Decimal
    days: list[AvailabilityDay]

    @field_serializer("consultation_fee", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)
