"""Tests for sign-up, sign-in, refresh and sign-out."""

from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.security import create_refresh_token, decode_access_token
from hernest.models import identities, profiles


@pytest.mark.asyncio
async def test_sign_up_creates_identity_and_profile(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    """Sign-up stores the identity and a profile with the chosen role."""
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={
            "email": "New.Doctor@Example.com",
            "password": "supersecret",
            "full_name": "Dr. New",
            "is_doctor": True,
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["identity"]["email"] == "new.doctor@example.com"
    assert data["identity"]["is_doctor"] is True
    assert "access_token" not in data

    result = await db_session.execute(
        select(profiles).where(profiles.c.id == UUID(data["identity"]["id"]))
    )
    profile = result.mappings().one()
    assert profile["full_name"] == "Dr. New"
    assert profile["is_doctor"] is True


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(client: AsyncClient, patient: dict) -> None:
    """Registering an existing email is a conflict."""
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={
            "email": patient["email"],
            "password": "supersecret",
            "full_name": "Someone Else",
        },
    )
    assert response.status_code == 409
    assert response.json()["error"] == "ConflictException"


@pytest.mark.asyncio
async def test_sign_up_short_password(client: AsyncClient) -> None:
    """Passwords shorter than eight characters are rejected."""
    response = await client.post(
        "/api/v1/auth/sign-up",
        json={"email": "short@example.com", "password": "abc", "full_name": "Short"},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_sign_in_returns_tokens(
    client: AsyncClient, db_session: AsyncSession, patient: dict
) -> None:
    """Valid credentials return a token pair for the identity."""
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": patient["email"], "password": "password123"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["identity"]["id"] == str(patient["id"])
    assert data["identity"]["last_sign_in_at"] is not None

    payload = decode_access_token(data["access_token"])
    assert payload is not None
    assert payload["sub"] == str(patient["id"])

    result = await db_session.execute(
        select(identities.c.last_sign_in_at).where(identities.c.id == patient["id"])
    )
    assert result.scalar_one() is not None


@pytest.mark.asyncio
async def test_sign_in_wrong_password(client: AsyncClient, patient: dict) -> None:
    """A wrong password is unauthorized."""
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": patient["email"], "password": "wrong-password"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_refresh_token(client: AsyncClient, patient: dict) -> None:
    """A valid refresh token yields a new pair."""
    refresh_token = create_refresh_token({"sub": str(patient["id"])})

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    data = response.json()
    assert decode_access_token(data["access_token"])["sub"] == str(patient["id"])


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, patient_headers: dict) -> None:
    """An access token cannot be used as a refresh token."""
    access_token = patient_headers["Authorization"].removeprefix("Bearer ")

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sign_out_revokes_refresh_token(
    client: AsyncClient, mock_redis, patient: dict
) -> None:
    """Signing out blacklists the refresh token."""
    refresh_token = create_refresh_token({"sub": str(patient["id"])})

    response = await client.post("/api/v1/auth/sign-out", json={"refresh_token": refresh_token})
    assert response.status_code == 204
    mock_redis.setex.assert_called_once()
    assert mock_redis.setex.call_args.args[0] == f"blacklist:{refresh_token}"

    mock_redis.exists.return_value = 1
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 401
    assert response.json()["message"] == "Token has been revoked"
