"""Period logs table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, String, Table, Text, Uuid, func

from hernest.core.clock import utcnow
from hernest.models.metadata import metadata

period_logs = Table(
    "period_logs",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("user_id", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    Column("start_date", Date, nullable=False, index=True),
    Column("end_date", Date),
    Column("flow_intensity", String(20)),
    Column("symptoms", JSON),
    Column("notes", Text),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    ),
)
