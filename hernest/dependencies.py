"""FastAPI dependencies.

Every route receives the resolved :class:`Session`; the ``require_*``
dependencies gate routes on it without changing it.
"""

from typing import Annotated

import redis
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.redis_client import CacheManager, get_redis_client
from hernest.database import get_db
from hernest.schemas.profiles import DoctorProfile, PatientProfile
from hernest.services.session_service import Session, SessionResolver

# Token is optional: anonymous callers resolve to the anonymous session
security = HTTPBearer(auto_error=False)

DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
RedisClient = Annotated[redis.Redis, Depends(get_redis_client)]


def get_cache_manager(redis_client: RedisClient) -> CacheManager:
    """Cache manager over the shared Redis client."""
    return CacheManager(redis_client)


CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]


async def get_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> Session:
    """Resolve the presented bearer token, if any."""
    token = credentials.credentials if credentials else None
    return await SessionResolver(cache_manager).resolve(db, token)


CurrentSession = Annotated[Session, Depends(get_session)]


async def require_identity(session: CurrentSession) -> Session:
    """
    Require a signed-in identity.

    Raises:
        HTTPException: 401 for the anonymous session
    """
    if not session.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


SignedInSession = Annotated[Session, Depends(require_identity)]


async def require_profile(session: SignedInSession) -> DoctorProfile | PatientProfile:
    """
    Require the signed-in identity's profile.

    Raises:
        HTTPException: 422 when the profile could not be loaded
    """
    if session.profile is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Profile not found. Please complete your profile.",
        )
    return session.profile


CurrentProfile = Annotated[DoctorProfile | PatientProfile, Depends(require_profile)]


async def require_doctor(profile: CurrentProfile) -> DoctorProfile:
    """
    Require a doctor profile.

    Raises:
        HTTPException: 403 for patients
    """
    if not isinstance(profile, DoctorProfile):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only doctors can perform this action",
        )
    return profile


async def require_patient(profile: CurrentProfile) -> PatientProfile:
    """
    Require a patient profile.

    Raises:
        HTTPException: 403 for doctors
    """
    if not isinstance(profile, PatientProfile):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only patients can perform this action",
        )
    return profile


CurrentDoctor = Annotated[DoctorProfile, Depends(require_doctor)]
CurrentPatient = Annotated[PatientProfile, Depends(require_patient)]
