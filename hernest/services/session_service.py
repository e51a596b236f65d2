"""Session and role resolution."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

import structlog
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.redis_client import CacheManager
from hernest.core.security import decode_access_token
from hernest.schemas.profiles import DoctorProfile, PatientProfile
from hernest.schemas.session import Dashboard
from hernest.services.auth_service import AuthService
from hernest.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)

ANONYMOUS_NAVIGATION = ("home", "auth")
MEMBER_NAVIGATION = ("dashboard", "profile", "health-records", "prescriptions")
PATIENT_NAVIGATION = ("book-appointment", "chat")


@dataclass(frozen=True)
class Session:
    """Signed-in identity and its profile, if any.

    A session with an identity but no profile is valid: every profile-derived
    value falls back to its default.
    """

    identity: dict[str, Any] | None = None
    profile: DoctorProfile | PatientProfile | None = None

    @property
    def authenticated(self) -> bool:
        return self.identity is not None

    @property
    def identity_id(self) -> UUID | None:
        return self.identity["id"] if self.identity else None

    @property
    def is_doctor(self) -> bool:
        return isinstance(self.profile, DoctorProfile)

    @property
    def dashboard(self) -> Dashboard | None:
        if not self.authenticated:
            return None
        return Dashboard.DOCTOR if self.is_doctor else Dashboard.PATIENT

    @property
    def navigation(self) -> list[str]:
        if not self.authenticated:
            return list(ANONYMOUS_NAVIGATION)
        if self.is_doctor:
            return list(MEMBER_NAVIGATION)
        return list(MEMBER_NAVIGATION + PATIENT_NAVIGATION)


ANONYMOUS = Session()


class SessionResolver:
    """Resolve the presenting bearer token into a Session."""

    def __init__(self, cache_manager: CacheManager):
        """Initialize resolver with cache manager."""
        self.auth_service = AuthService(cache_manager)
        self.profile_service = ProfileService(cache_manager)

    async def resolve(self, db: AsyncSession, token: str | None) -> Session:
        """
        Resolve an access token.

        Args:
            db: Database session
            token: Bearer access token, if one was presented

        Returns:
            The anonymous session for a missing or invalid token, otherwise
            the identity with its profile (or no profile when it cannot be read)
        """
        if not token:
            return ANONYMOUS

        payload = decode_access_token(token)
        if payload is None:
            return ANONYMOUS

        try:
            identity_id = UUID(str(payload.get("sub")))
        except ValueError:
            return ANONYMOUS

        identity = await self.auth_service.get_identity(db, identity_id)
        if identity is None:
            return ANONYMOUS

        try:
            profile = await self.profile_service.get_profile(db, identity_id)
        except (SQLAlchemyError, ValidationError) as e:
            await db.rollback()
            logger.warning("profile_fetch_failed", identity_id=str(identity_id), error=str(e))
            profile = None

        return Session(identity=identity, profile=profile)
