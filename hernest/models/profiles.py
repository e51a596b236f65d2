"""Profile table model using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from hernest.core.clock import utcnow
from hernest.models.metadata import metadata

profiles = Table(
    "profiles",
    metadata,
    # Same id as the owning identity
    Column(
        "id",
        Uuid,
        ForeignKey("identities.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    # Shared fields
    Column("full_name", Text),
    Column("date_of_birth", Date),
    Column("phone_number", String(20)),
    Column("is_doctor", Boolean, nullable=False, default=False, index=True),
    # Doctor fields
    Column("specialization", String(200), index=True),
    Column("license_number", String(100)),
    Column("consultation_fee", Numeric(10, 2)),
    Column("years_of_experience", Integer),
    # Patient fields
    Column("cycle_length", Integer),
    Column("last_period_date", Date),
    Column("health_conditions", JSON),
    # Audit
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
    CheckConstraint(
        "consultation_fee IS NULL OR consultation_fee >= 0",
        name="profiles_consultation_fee_check",
    ),
)
