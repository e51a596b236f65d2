"""Health record service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.clock import utcnow
from hernest.models.health_records import health_records
from hernest.schemas.health_records import HealthRecordCreate, HealthRecordResponse, RecordType

logger = structlog.get_logger(__name__)


class HealthRecordService:
    """Service for the append-only health log."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def add_record(self, user_id: UUID, data: HealthRecordCreate) -> HealthRecordResponse:
        """
        Add a health record for its owner.

        Args:
            user_id: Owner of the record
            data: Record details; record date defaults to now

        Returns:
            Created record
        """
        stmt = (
            insert(health_records)
            .values(
                user_id=user_id,
                record_date=data.record_date or utcnow(),
                record_type=data.record_type.value,
                title=data.title,
                description=data.description,
                attachments=data.attachments,
                metadata=data.metadata,
            )
            .returning(health_records)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().one()
        await self.db.commit()

        logger.info(
            "health_record_added",
            record_id=str(row["id"]),
            user_id=str(user_id),
            record_type=data.record_type.value,
        )

        return HealthRecordResponse.model_validate(dict(row))

    async def list_records(
        self,
        user_id: UUID,
        record_type: RecordType | None = None,
    ) -> list[HealthRecordResponse]:
        """List a user's records, most recent first."""
        conditions = [health_records.c.user_id == user_id]

        if record_type:
            conditions.append(health_records.c.record_type == record_type.value)

        stmt = (
            select(health_records)
            .where(and_(*conditions))
            .order_by(health_records.c.record_date.desc())
        )
        result = await self.db.execute(stmt)
        return [HealthRecordResponse.model_validate(dict(row)) for row in result.mappings().all()]
