"""Identity table model using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Table, Text, Uuid, func

from hernest.core.clock import utcnow
from hernest.models.metadata import metadata

identities = Table(
    "identities",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Credentials
    Column("email", Text, nullable=False, unique=True, index=True),
    Column("password_hash", Text, nullable=False),
    # Role chosen at sign-up, mirrored into the profile
    Column("is_doctor", Boolean, nullable=False, default=False),
    # Audit
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    ),
    Column("last_sign_in_at", DateTime(timezone=True)),
)
