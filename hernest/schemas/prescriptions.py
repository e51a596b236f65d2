"""Prescription schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from hernest.core.clock import as_utc


class Medication(BaseModel):
    """One entry of a prescription."""

    name: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field("", max_length=100)
    duration: str = Field("", max_length=100)


class PrescriptionCreate(BaseModel):
    """Schema for issuing a prescription."""

    appointment_id: UUID
    medications: list[Medication] = Field(..., min_length=1)
    instructions: str | None = Field(None, max_length=2000)


class PrescriptionResponse(BaseModel):
    """Schema for prescription response."""

    id: UUID
    appointment_id: UUID
    doctor_id: UUID
    patient_id: UUID
    medications: list[Medication]
    instructions: str | None = None
    valid_until: datetime | None = None
    created_at: datetime
    doctor_name: str | None = None
    patient_name: str | None = None
    appointment_scheduled_for: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("valid_until", "created_at", "appointment_scheduled_for")
    @classmethod
    def normalize_timestamp(cls, v: datetime | None) -> datetime | None:
        """Report timestamps in UTC."""
        return as_utc(v) if v is not None else None
