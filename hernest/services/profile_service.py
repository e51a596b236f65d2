"""Profile service for business logic."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.clock import utcnow
from hernest.core.exceptions import BadRequestException, NotFoundException
from hernest.core.redis_client import CacheManager
from hernest.models.profiles import profiles
from hernest.schemas.profiles import (
    DOCTOR_FIELDS,
    PATIENT_FIELDS,
    DoctorProfile,
    PatientProfile,
    ProfileUpdate,
    profile_from_row,
)


class ProfileService:
    """Service for profile operations."""

    # Cache TTL in seconds (30 minutes for profiles)
    PROFILE_CACHE_TTL = 1800

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _get_profile_cache_key(profile_id: UUID) -> str:
        """Generate cache key for profile."""
        return f"profile:{profile_id}"

    def invalidate(self, profile_id: UUID) -> None:
        """Drop the cached profile. Call after the change is committed."""
        if self.cache:
            self.cache.delete(self._get_profile_cache_key(profile_id))

    async def get_profile_row(self, db: AsyncSession, profile_id: UUID) -> dict[str, Any] | None:
        """Get the stored profile row by ID with caching."""
        # Try cache first
        if self.cache:
            cached = self.cache.get_json(self._get_profile_cache_key(profile_id))
            if cached:
                return cached

        query = select(profiles).where(profiles.c.id == profile_id)
        result = await db.execute(query)
        row = result.mappings().first()

        if not row:
            return None

        profile_dict = dict(row)

        if self.cache:
            self.cache.set_json(
                self._get_profile_cache_key(profile_id),
                profile_dict,
                ttl=self.PROFILE_CACHE_TTL,
            )

        return profile_dict

    async def get_profile(
        self, db: AsyncSession, profile_id: UUID
    ) -> DoctorProfile | PatientProfile | None:
        """Get the role variant of a profile."""
        row = await self.get_profile_row(db, profile_id)
        return profile_from_row(row) if row else None

    async def create_profile(
        self,
        db: AsyncSession,
        profile_id: UUID,
        full_name: str,
        is_doctor: bool,
    ) -> None:
        """Insert the profile that accompanies a new identity.

        The caller owns the transaction.
        """
        await db.execute(
            profiles.insert().values(
                id=profile_id,
                full_name=full_name,
                is_doctor=is_doctor,
            )
        )

    async def update_profile(
        self,
        db: AsyncSession,
        profile: DoctorProfile | PatientProfile,
        data: ProfileUpdate,
    ) -> DoctorProfile | PatientProfile:
        """
        Update the caller's profile.

        Args:
            db: Database session
            profile: Current profile of the caller
            data: Fields to change

        Returns:
            Updated profile

        Raises:
            BadRequestException: If a field of the other role is supplied
            NotFoundException: If the profile no longer exists
        """
        update_data = data.model_dump(exclude_unset=True)

        foreign = PATIENT_FIELDS if isinstance(profile, DoctorProfile) else DOCTOR_FIELDS
        rejected = sorted(foreign.intersection(update_data))
        if rejected:
            raise BadRequestException(
                f"Fields not applicable to a {profile.role} profile: {', '.join(rejected)}"
            )

        if not update_data:
            return profile

        update_data["updated_at"] = utcnow()

        query = (
            update(profiles)
            .where(profiles.c.id == profile.id)
            .values(**update_data)
            .returning(profiles)
        )
        result = await db.execute(query)
        row = result.mappings().first()

        if not row:
            await db.rollback()
            raise NotFoundException("Profile not found")

        await db.commit()
        self.invalidate(profile.id)

        return profile_from_row(dict(row))

    async def advance_last_period_date(
        self, db: AsyncSession, profile_id: UUID, start_date: date
    ) -> bool:
        """Move ``last_period_date`` forward to ``start_date`` if it is later.

        Returns True when the profile changed. The caller commits and then
        invalidates the cached profile.
        """
        query = (
            update(profiles)
            .where(
                and_(
                    profiles.c.id == profile_id,
                    (profiles.c.last_period_date.is_(None))
                    | (profiles.c.last_period_date < start_date),
                )
            )
            .values(last_period_date=start_date, updated_at=utcnow())
        )
        result = await db.execute(query)
        return bool(result.rowcount)

    async def list_doctors(
        self,
        db: AsyncSession,
        specialization: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """List doctor profiles with optional specialization filter."""
        conditions = [profiles.c.is_doctor.is_(True)]

        if specialization:
            conditions.append(profiles.c.specialization.ilike(f"%{specialization}%"))

        query = (
            select(profiles)
            .where(and_(*conditions))
            .order_by(profiles.c.full_name)
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def get_doctor(self, db: AsyncSession, doctor_id: UUID) -> DoctorProfile:
        """
        Get a doctor profile.

        Raises:
            NotFoundException: If the ID is not a doctor profile
        """
        profile = await self.get_profile(db, doctor_id)
        if not isinstance(profile, DoctorProfile):
            raise NotFoundException("Doctor not found")
        return profile
