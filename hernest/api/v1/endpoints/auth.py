"""Authentication endpoints."""

from fastapi import APIRouter, status

from hernest.dependencies import CacheManagerDep, DatabaseSession
from hernest.schemas.auth import (
    IdentityResponse,
    LoginResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
    Token,
    TokenRefresh,
)
from hernest.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def sign_up(
    request: SignUpRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> SignUpResponse:
    """
    Create an identity and its profile.

    The new account is not signed in; the client signs in separately.

    Args:
        request: Email, password, full name and role choice
        db: Database session
        cache_manager: Cache manager

    Returns:
        Created identity
    """
    identity = await AuthService(cache_manager).sign_up(db, request)
    return SignUpResponse(identity=IdentityResponse.model_validate(identity))


@router.post(
    "/sign-in",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
)
async def sign_in(
    request: SignInRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> LoginResponse:
    """
    Verify credentials and return JWT tokens.

    Args:
        request: Email and password
        db: Database session
        cache_manager: Cache manager

    Returns:
        Access token, refresh token and identity
    """
    identity, tokens = await AuthService(cache_manager).sign_in(db, request)

    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        identity=IdentityResponse.model_validate(identity),
    )


@router.post(
    "/refresh",
    response_model=Token,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
)
async def refresh_token(request: TokenRefresh, cache_manager: CacheManagerDep) -> Token:
    """Issue a new token pair from a refresh token that has not been revoked."""
    return AuthService(cache_manager).refresh_access_token(request.refresh_token)


@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out and revoke the refresh token",
)
async def sign_out(request: TokenRefresh, cache_manager: CacheManagerDep) -> None:
    """
    Revoke a refresh token.

    Args:
        request: Refresh token to revoke
        cache_manager: Cache manager
    """
    AuthService(cache_manager).revoke_token(request.refresh_token)
