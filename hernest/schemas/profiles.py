"""Profile schemas.

Profiles are stored as a single row with an ``is_doctor`` flag. The API turns
that row into a tagged union keyed by ``role`` so doctor-only and patient-only
fields never appear on the wrong variant.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter, field_serializer, field_validator


class Role(str, Enum):
    """Profile role enumeration."""

    DOCTOR = "doctor"
    PATIENT = "patient"


DOCTOR_FIELDS = frozenset(
    {"specialization", "license_number", "consultation_fee", "years_of_experience"}
)
PATIENT_FIELDS = frozenset({"cycle_length", "last_period_date", "health_conditions"})


class ProfileBase(BaseModel):
    """Fields shared by both roles."""

    id: UUID
    full_name: str | None = None
    date_of_birth: date | None = None
    phone_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DoctorProfile(ProfileBase):
    """Doctor variant of a profile."""

    role: Literal["doctor"] = "doctor"
    specialization: str | None = None
    license_number: str | None = None
    consultation_fee: Decimal | None = None
    years_of_experience: int | None = None

    @field_serializer("consultation_fee", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return float(value) if value is not None else None


class PatientProfile(ProfileBase):
    """Patient variant of a profile."""

    role: Literal["patient"] = "patient"
    cycle_length: int | None = None
    last_period_date: date | None = None
    health_conditions: list[str] | None = None


Profile = Annotated[DoctorProfile | PatientProfile, Field(discriminator="role")]

_profile_adapter: TypeAdapter[DoctorProfile | PatientProfile] = TypeAdapter(Profile)


def profile_from_row(row: dict[str, Any]) -> DoctorProfile | PatientProfile:
    """Build the role variant for a stored profile row."""
    data = dict(row)
    is_doctor = bool(data.pop("is_doctor", False))
    data["role"] = Role.DOCTOR.value if is_doctor else Role.PATIENT.value
    return _profile_adapter.validate_python(data)


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile.

    Fields of the other role are rejected by the service.
    """

    full_name: str | None = Field(None, min_length=1, max_length=200)
    date_of_birth: date | None = None
    phone_number: str | None = Field(None, max_length=20)
    # Doctor
    specialization: str | None = Field(None, max_length=200)
    license_number: str | None = Field(None, max_length=100)
    consultation_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    years_of_experience: int | None = Field(None, ge=0, le=80)
    # Patient
    cycle_length: int | None = Field(None, ge=15, le=60)
    last_period_date: date | None = None
    health_conditions: list[str] | None = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str | None) -> str:
        """Name may be changed but not cleared."""
        if v is None:
            raise ValueError("Full name cannot be empty")
        return v


class DoctorSummary(BaseModel):
    """Doctor entry in the directory."""

    id: UUID
    full_name: str | None = None
    specialization: str | None = None
    consultation_fee: Decimal | None = None
    years_of_experience: int | None = None

    model_config = {"from_attributes": True}

    @field_serializer("consultation_fee", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> float | None:
        """Serialize Decimal to float for JSON."""
        return float(value) if value is not None else None
