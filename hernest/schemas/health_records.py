"""Health record schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from hernest.core.clock import as_utc


class RecordType(str, Enum):
    """Health record category."""

    GENERAL = "general"
    MENSTRUAL = "menstrual"
    MEDICATION = "medication"
    SYMPTOM = "symptom"
    TEST = "test"


RECORD_TYPE_LABELS = {
    RecordType.GENERAL: "General Health",
    RecordType.MENSTRUAL: "Menstrual Health",
    RecordType.MEDICATION: "Medication",
    RecordType.SYMPTOM: "Symptom",
    RecordType.TEST: "Test Results",
}


class HealthRecordCreate(BaseModel):
    """Schema for adding a health record."""

    record_type: RecordType = RecordType.GENERAL
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    record_date: datetime | None = None
    attachments: list[str] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class HealthRecordResponse(BaseModel):
    """Schema for health record response."""

    id: UUID
    user_id: UUID
    record_date: datetime
    record_type: RecordType
    title: str
    description: str
    attachments: list[str] | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("record_date", "created_at")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Report timestamps in UTC."""
        return as_utc(v)


class RecordTypeOption(BaseModel):
    """Selectable record category."""

    value: RecordType
    label: str
