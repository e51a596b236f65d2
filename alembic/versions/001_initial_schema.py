"""Initial schema - identities, profiles, appointments and records.

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def _owner(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("profiles.id"),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "identities",
        _uuid_pk(),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("is_doctor", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _timestamp("created_at"),
        sa.Column("last_sign_in_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index("ix_identities_email", "identities", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("identities.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("is_doctor", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("specialization", sa.String(200), nullable=True),
        sa.Column("license_number", sa.String(100), nullable=True),
        sa.Column("consultation_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("years_of_experience", sa.Integer(), nullable=True),
        sa.Column("cycle_length", sa.Integer(), nullable=True),
        sa.Column("last_period_date", sa.Date(), nullable=True),
        sa.Column("health_conditions", postgresql.JSONB(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint(
            "consultation_fee IS NULL OR consultation_fee >= 0",
            name="profiles_consultation_fee_check",
        ),
    )
    op.create_index("ix_profiles_is_doctor", "profiles", ["is_doctor"])
    op.create_index("ix_profiles_specialization", "profiles", ["specialization"])

    op.create_table(
        "appointments",
        _uuid_pk(),
        _owner("patient_id"),
        _owner("doctor_id"),
        sa.Column("scheduled_for", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("meeting_link", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')",
            name="appointments_status_check",
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'completed')",
            name="appointments_payment_status_check",
        ),
        sa.CheckConstraint("payment_amount >= 0", name="appointments_payment_amount_check"),
    )
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])
    op.create_index("ix_appointments_scheduled_for", "appointments", ["scheduled_for"])

    op.create_table(
        "prescriptions",
        _uuid_pk(),
        sa.Column(
            "appointment_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("appointments.id"),
            nullable=False,
        ),
        _owner("doctor_id"),
        _owner("patient_id"),
        sa.Column("medications", postgresql.JSONB(), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("valid_until", postgresql.TIMESTAMP(timezone=True), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_prescriptions_appointment_id", "prescriptions", ["appointment_id"])
    op.create_index("ix_prescriptions_doctor_id", "prescriptions", ["doctor_id"])
    op.create_index("ix_prescriptions_patient_id", "prescriptions", ["patient_id"])

    op.create_table(
        "health_records",
        _uuid_pk(),
        _owner("user_id"),
        sa.Column(
            "record_date",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("record_type", sa.String(20), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("attachments", postgresql.JSONB(), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        _timestamp("created_at"),
        sa.CheckConstraint(
            "record_type IN ('general', 'menstrual', 'medication', 'symptom', 'test')",
            name="health_records_record_type_check",
        ),
    )
    op.create_index("ix_health_records_user_id", "health_records", ["user_id"])

    op.create_table(
        "period_logs",
        _uuid_pk(),
        _owner("user_id"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("flow_intensity", sa.String(20), nullable=True),
        sa.Column("symptoms", postgresql.JSONB(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_period_logs_user_id", "period_logs", ["user_id"])
    op.create_index("ix_period_logs_start_date", "period_logs", ["start_date"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("period_logs")
    op.drop_table("health_records")
    op.drop_table("prescriptions")
    op.drop_table("appointments")
    op.drop_table("profiles")
    op.drop_index("ix_identities_email", table_name="identities")
    op.drop_table("identities")
