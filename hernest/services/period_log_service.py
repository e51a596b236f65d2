"""Period log service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.clock import clinic_today
from hernest.core.exceptions import ValidationException
from hernest.core.redis_client import CacheManager
from hernest.models.period_logs import period_logs
from hernest.schemas.period_logs import PeriodLogCreate, PeriodLogResponse
from hernest.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)


class PeriodLogService:
    """Service for cycle tracking."""

    def __init__(self, db: AsyncSession, cache_manager: CacheManager | None = None):
        """Initialize service with database session and optional cache manager."""
        self.db = db
        self.profile_service = ProfileService(cache_manager)

    async def add_log(self, user_id: UUID, data: PeriodLogCreate) -> PeriodLogResponse:
        """
        Log the start of a cycle.

        The owner's ``last_period_date`` advances when this start date is later.

        Args:
            user_id: Owner of the log
            data: Log details; start date defaults to today

        Returns:
            Created log

        Raises:
            ValidationException: If the end date precedes the start date
        """
        start_date = data.start_date or clinic_today()

        if data.end_date and data.end_date < start_date:
            raise ValidationException("End date must not be before start date")

        stmt = (
            insert(period_logs)
            .values(
                user_id=user_id,
                start_date=start_date,
                end_date=data.end_date,
                flow_intensity=data.flow_intensity,
                symptoms=data.symptoms,
                notes=data.notes,
            )
            .returning(period_logs)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().one()

        advanced = await self.profile_service.advance_last_period_date(
            self.db, user_id, start_date
        )
        await self.db.commit()
        if advanced:
            self.profile_service.invalidate(user_id)

        logger.info(
            "period_logged",
            user_id=str(user_id),
            start_date=start_date.isoformat(),
            last_period_date_updated=advanced,
        )

        return PeriodLogResponse.model_validate(dict(row))

    async def list_logs(self, user_id: UUID) -> list[PeriodLogResponse]:
        """List a user's logs, most recent start first."""
        stmt = (
            select(period_logs)
            .where(period_logs.c.user_id == user_id)
            .order_by(period_logs.c.start_date.desc(), period_logs.c.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [PeriodLogResponse.model_validate(dict(row)) for row in result.mappings().all()]
