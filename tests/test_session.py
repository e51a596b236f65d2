"""Tests for session resolution and route gating."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.services.profile_service import ProfileService
from tests.factories import bearer, create_member


@pytest.mark.asyncio
async def test_anonymous_session(client: AsyncClient) -> None:
    """No token resolves to the anonymous session."""
    response = await client.get("/api/v1/session")
    assert response.status_code == 200
    data = response.json()
    assert data["authenticated"] is False
    assert data["identity"] is None
    assert data["profile"] is None
    assert data["is_doctor"] is False
    assert data["dashboard"] is None
    assert data["navigation"] == ["home", "auth"]


@pytest.mark.asyncio
async def test_invalid_token_is_anonymous(client: AsyncClient) -> None:
    """A malformed token is treated as no token."""
    response = await client.get(
        "/api/v1/session", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 200
    assert response.json()["authenticated"] is False


@pytest.mark.asyncio
async def test_doctor_session(client: AsyncClient, doctor: dict, doctor_headers: dict) -> None:
    """A doctor profile mounts the doctor dashboard."""
    response = await client.get("/api/v1/session", headers=doctor_headers)
    data = response.json()
    assert data["authenticated"] is True
    assert data["identity"]["id"] == str(doctor["id"])
    assert data["profile"]["role"] == "doctor"
    assert data["profile"]["specialization"] == "Gynecology"
    assert "cycle_length" not in data["profile"]
    assert data["is_doctor"] is True
    assert data["dashboard"] == "doctor"
    assert data["navigation"] == ["dashboard", "profile", "health-records", "prescriptions"]


@pytest.mark.asyncio
async def test_patient_session(client: AsyncClient, patient_headers: dict) -> None:
    """A patient profile mounts the patient dashboard and booking routes."""
    response = await client.get("/api/v1/session", headers=patient_headers)
    data = response.json()
    assert data["profile"]["role"] == "patient"
    assert data["profile"]["cycle_length"] == 28
    assert "consultation_fee" not in data["profile"]
    assert data["is_doctor"] is False
    assert data["dashboard"] == "patient"
    assert data["navigation"] == [
        "dashboard",
        "profile",
        "health-records",
        "prescriptions",
        "book-appointment",
        "chat",
    ]


@pytest.mark.asyncio
async def test_identity_without_profile(client: AsyncClient, db_session: AsyncSession) -> None:
    """An identity with no profile keeps the session with defaults."""
    member = await create_member(
        db_session, "noprofile@example.com", "No Profile", is_doctor=True, with_profile=False
    )

    response = await client.get("/api/v1/session", headers=bearer(member))
    data = response.json()
    assert data["authenticated"] is True
    assert data["profile"] is None
    # The role comes from the profile only
    assert data["is_doctor"] is False
    assert data["dashboard"] == "patient"


@pytest.mark.asyncio
async def test_profile_fetch_failure_degrades(
    client: AsyncClient,
    doctor: dict,
    doctor_headers: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A store error while loading the profile leaves the identity signed in."""

    async def failing_get_profile(self, db, profile_id):
        raise OperationalError("SELECT * FROM profiles", {}, Exception("connection lost"))

    monkeypatch.setattr(ProfileService, "get_profile", failing_get_profile)

    response = await client.get("/api/v1/session", headers=doctor_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["authenticated"] is True
    assert data["identity"]["id"] == str(doctor["id"])
    assert data["profile"] is None
    assert data["is_doctor"] is False


@pytest.mark.asyncio
async def test_unknown_identity_is_anonymous(client: AsyncClient) -> None:
    """A well-formed token for a deleted identity is anonymous."""
    response = await client.get("/api/v1/session", headers=bearer({"id": uuid4()}))
    assert response.json()["authenticated"] is False


@pytest.mark.asyncio
async def test_protected_route_requires_identity(client: AsyncClient) -> None:
    """Anonymous callers get 401 on protected routes."""
    response = await client.get("/api/v1/profiles/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_protected_route_requires_profile(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    """Routes needing a profile answer 422 when it is missing."""
    member = await create_member(
        db_session, "noprofile@example.com", "No Profile", with_profile=False
    )

    response = await client.get("/api/v1/profiles/me", headers=bearer(member))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_doctor_route_rejects_patient(client: AsyncClient, patient_headers: dict) -> None:
    """Doctor-only routes answer 403 to patients."""
    response = await client.get("/api/v1/dashboard/doctor", headers=patient_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_patient_route_rejects_doctor(client: AsyncClient, doctor_headers: dict) -> None:
    """Patient-only routes answer 403 to doctors."""
    response = await client.post(
        "/api/v1/chat", json={"message": "hello"}, headers=doctor_headers
    )
    assert response.status_code == 403
