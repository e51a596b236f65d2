"""Appointments table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    Table,
    Text,
    Uuid,
    func,
)

from hernest.core.clock import utcnow
from hernest.models.metadata import metadata

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Parties
    Column("patient_id", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    Column("doctor_id", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    # Schedule (stored in UTC)
    Column("scheduled_for", DateTime(timezone=True), nullable=False, index=True),
    # Lifecycle
    Column("status", Text, nullable=False, default="pending", server_default="pending"),
    Column(
        "payment_status",
        Text,
        nullable=False,
        default="pending",
        server_default="pending",
    ),
    Column("payment_amount", Numeric(10, 2), nullable=False, default=0, server_default="0"),
    # Metadata
    Column("meeting_link", Text),
    Column("notes", Text),
    # Audit fields
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    ),
    # Constraints
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'cancelled')",
        name="appointments_status_check",
    ),
    CheckConstraint(
        "payment_status IN ('pending', 'completed')",
        name="appointments_payment_status_check",
    ),
    CheckConstraint("payment_amount >= 0", name="appointments_payment_amount_check"),
)
