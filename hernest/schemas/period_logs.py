"""Period log schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class PeriodLogCreate(BaseModel):
    """Schema for logging a cycle start."""

    start_date: date | None = None
    end_date: date | None = None
    flow_intensity: str | None = Field(None, max_length=20)
    symptoms: list[str] | None = None
    notes: str | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def validate_range(self) -> "PeriodLogCreate":
        """Validate end date does not precede start date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class PeriodLogResponse(BaseModel):
    """Schema for period log response."""

    id: UUID
    user_id: UUID
    start_date: date
    end_date: date | None = None
    flow_intensity: str | None = None
    symptoms: list[str] | None = None
    notes: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
