"""Authentication service for sign-up, sign-in and JWT handling."""

from datetime import timedelta
from typing import Any

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.config import settings
from hernest.core.clock import utcnow
from hernest.core.exceptions import ConflictException, UnauthorizedException
from hernest.core.redis_client import CacheManager
from hernest.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from hernest.models.identities import identities
from hernest.schemas.auth import SignInRequest, SignUpRequest, Token
from hernest.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)


class AuthService:
    """Authentication service owning the session lifecycle."""

    def __init__(self, cache_manager: CacheManager):
        """Initialize auth service with cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _blacklist_key(token: str) -> str:
        return f"blacklist:{token}"

    async def sign_up(self, db: AsyncSession, data: SignUpRequest) -> dict[str, Any]:
        """
        Create an identity and its profile.

        Args:
            db: Database session
            data: Sign-up form

        Returns:
            Created identity

        Raises:
            ConflictException: If the email is already registered
        """
        email = data.email.lower()

        existing = await db.execute(select(identities.c.id).where(identities.c.email == email))
        if existing.first():
            raise ConflictException("An account with this email already exists")

        try:
            result = await db.execute(
                identities.insert()
                .values(
                    email=email,
                    password_hash=get_password_hash(data.password),
                    is_doctor=data.is_doctor,
                )
                .returning(identities)
            )
            identity = dict(result.mappings().one())

            await ProfileService(self.cache).create_profile(
                db,
                profile_id=identity["id"],
                full_name=data.full_name,
                is_doctor=data.is_doctor,
            )
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException("An account with this email already exists") from e

        logger.info("identity_created", identity_id=str(identity["id"]), is_doctor=data.is_doctor)
        return identity

    async def sign_in(self, db: AsyncSession, data: SignInRequest) -> tuple[dict[str, Any], Token]:
        """
        Verify credentials and issue a token pair.

        Raises:
            UnauthorizedException: If the email or password is wrong
        """
        result = await db.execute(
            select(identities).where(identities.c.email == data.email.lower())
        )
        identity = result.mappings().first()

        if not identity or not verify_password(data.password, identity["password_hash"]):
            logger.info("sign_in_rejected", email=data.email.lower())
            raise UnauthorizedException("Invalid email or password")

        result = await db.execute(
            update(identities)
            .where(identities.c.id == identity["id"])
            .values(last_sign_in_at=utcnow())
            .returning(identities)
        )
        await db.commit()
        identity = result.mappings().one()

        logger.info("sign_in_succeeded", identity_id=str(identity["id"]))
        return dict(identity), self.create_tokens(str(identity["id"]))

    async def get_identity(self, db: AsyncSession, identity_id: Any) -> dict[str, Any] | None:
        """Get identity by ID."""
        result = await db.execute(select(identities).where(identities.c.id == identity_id))
        identity = result.mappings().first()
        return dict(identity) if identity else None

    def create_tokens(self, identity_id: str) -> Token:
        """
        Create access and refresh tokens for an identity.

        Args:
            identity_id: Identity identifier

        Returns:
            Token pair (access and refresh)
        """
        access_token = create_access_token(
            data={"sub": identity_id},
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

        refresh_token = create_refresh_token(
            data={"sub": identity_id},
            expires_delta=timedelta(days=settings.refresh_token_expire_days),
        )

        return Token(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
        )

    def refresh_access_token(self, refresh_token: str) -> Token:
        """
        Create new token pair from refresh token.

        Args:
            refresh_token: Valid refresh token

        Returns:
            New token pair

        Raises:
            UnauthorizedException: If refresh token is invalid or revoked
        """
        payload = decode_refresh_token(refresh_token)

        if payload is None:
            raise UnauthorizedException("Invalid refresh token")

        identity_id = payload.get("sub")
        if identity_id is None:
            raise UnauthorizedException("Invalid refresh token")

        if self.cache.exists(self._blacklist_key(refresh_token)):
            raise UnauthorizedException("Token has been revoked")

        return self.create_tokens(identity_id)

    def revoke_token(self, token: str) -> None:
        """
        Revoke a refresh token by adding it to blacklist.

        The entry lives as long as the token could still be used.

        Args:
            token: Token to revoke
        """
        ttl = settings.refresh_token_expire_days * 86400
        self.cache.set(self._blacklist_key(token), "1", ttl=ttl)
        logger.info("refresh_token_revoked")
