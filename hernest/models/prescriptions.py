"""Prescriptions table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Table, Text, Uuid, func

from hernest.core.clock import utcnow
from hernest.models.metadata import metadata

prescriptions = Table(
    "prescriptions",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "appointment_id",
        Uuid,
        ForeignKey("appointments.id"),
        nullable=False,
        index=True,
    ),
    Column("doctor_id", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    Column("patient_id", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    # Ordered list of {name, dosage, frequency, duration}
    Column("medications", JSON, nullable=False),
    Column("instructions", Text),
    Column("valid_until", DateTime(timezone=True)),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    ),
)
