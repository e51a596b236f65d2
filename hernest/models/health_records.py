"""Health records table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from hernest.core.clock import utcnow
from hernest.models.metadata import metadata

health_records = Table(
    "health_records",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("user_id", Uuid, ForeignKey("profiles.id"), nullable=False, index=True),
    Column("record_date", DateTime(timezone=True), nullable=False, default=utcnow),
    Column("record_type", String(20), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False),
    Column("attachments", JSON),
    Column("metadata", JSON),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    ),
    CheckConstraint(
        "record_type IN ('general', 'menstrual', 'medication', 'symptom', 'test')",
        name="health_records_record_type_check",
    ),
)
