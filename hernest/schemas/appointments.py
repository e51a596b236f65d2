"""Appointment schemas for request/response validation."""

import datetime as dt
import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer, field_validator

from hernest.core.clock import as_utc


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    COMPLETED = "completed"


class AppointmentAction(str, Enum):
    """Actions that move an appointment between states."""

    CONFIRM = "confirm"
    CANCEL = "cancel"
    PAY = "pay"


class AppointmentCreate(BaseModel):
    """Booking request.

    Selections are optional here so that a missing one is reported by the
    booking service as a single validation failure.
    """

    doctor_id: UUID | None = None
    date: dt.date | None = None
    time: str | None = Field(None, examples=["14:00"])
    notes: str | None = Field(None, max_length=1000)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    patient_id: UUID
    doctor_id: UUID
    scheduled_for: datetime
    status: AppointmentStatus
    payment_status: PaymentStatus
    payment_amount: Decimal
    meeting_link: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    doctor_name: str | None = None
    doctor_specialization: str | None = None
    patient_name: str | None = None
    available_actions: list[AppointmentAction] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("scheduled_for", "created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Report timestamps in UTC."""
        return as_utc(v)

    @field_serializer("payment_amount", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)


class AppointmentListResponse(BaseModel):
    """Schema for appointment list response."""

    total: int
    items: list[AppointmentResponse]


class AppointmentFilters(BaseModel):
    """Schema for appointment filtering."""

    status: AppointmentStatus | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None


_EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")


class PaymentRequest(BaseModel):
    """Simulated card payment.

    Card details are checked for shape only and are never stored.
    """

    card_number: str = Field(..., examples=["4242 4242 4242 4242"])
    expiry: str = Field(..., examples=["12/29"])
    cvc: str = Field(..., min_length=3, max_length=4)
    cardholder_name: str = Field(..., min_length=1, max_length=200)

    @field_validator("card_number")
    @classmethod
    def validate_card_number(cls, v: str) -> str:
        """Validate card number format."""
        cleaned = v.replace(" ", "").replace("-", "")
        if not cleaned.isdigit():
            raise ValueError("Card number must contain only digits and separators")
        if not 12 <= len(cleaned) <= 19:
            raise ValueError("Card number must have between 12 and 19 digits")
        return cleaned

    @field_validator("expiry")
    @classmethod
    def validate_expiry(cls, v: str) -> str:
        """Validate MM/YY expiry."""
        if not _EXPIRY_RE.match(v):
            raise ValueError("Expiry must be in MM/YY format")
        return v

    @field_validator("cvc")
    @classmethod
    def validate_cvc(cls, v: str) -> str:
        """Validate CVC digits."""
        if not v.isdigit():
            raise ValueError("CVC must contain only digits")
        return v


class PaymentResponse(BaseModel):
    """Result of a simulated payment."""

    appointment: AppointmentResponse
    amount_charged: Decimal
    message: str = "Payment processed successfully"

    @field_serializer("amount_charged", when_used="json")
    def serialize_decimal(self, value: Decimal) -> float:
        """Serialize Decimal to float for JSON."""
        return float(value)
