"""Tests for prescriptions, health records and period logs."""

from datetime import date, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.core.clock import clinic_today
from hernest.core.redis_client import CacheManager
from hernest.models import profiles
from hernest.schemas.period_logs import PeriodLogCreate
from hernest.services.period_log_service import PeriodLogService
from tests.factories import bearer, create_member


async def booked_appointment(client: AsyncClient, doctor: dict, patient_headers: dict) -> dict:
    response = await client.post(
        "/api/v1/appointments",
        json={
            "doctor_id": str(doctor["id"]),
            "date": (clinic_today() + timedelta(days=1)).isoformat(),
            "time": "11:00",
        },
        headers=patient_headers,
    )
    assert response.status_code == 201
    return response.json()


MEDICATIONS = [
    {"name": "Ibuprofen", "dosage": "400mg", "frequency": "Twice daily", "duration": "5 days"},
    {"name": "Iron", "dosage": "65mg"},
]


@pytest.mark.asyncio
async def test_create_prescription(
    client: AsyncClient,
    doctor: dict,
    patient: dict,
    doctor_headers: dict,
    patient_headers: dict,
) -> None:
    """The prescription belongs to the appointment's patient."""
    appointment = await booked_appointment(client, doctor, patient_headers)

    response = await client.post(
        "/api/v1/prescriptions",
        json={
            "appointment_id": appointment["id"],
            "medications": MEDICATIONS,
            "instructions": "Take with food",
        },
        headers=doctor_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["doctor_id"] == str(doctor["id"])
    assert data["patient_id"] == str(patient["id"])
    assert [m["name"] for m in data["medications"]] == ["Ibuprofen", "Iron"]
    assert data["medications"][1]["frequency"] == ""
    assert data["doctor_name"] == "Dr. Jane Smith"
    assert data["patient_name"] == "Alex Patient"
    assert data["appointment_scheduled_for"] == appointment["scheduled_for"]

    valid_until = datetime.fromisoformat(data["valid_until"])
    created = datetime.fromisoformat(data["created_at"])
    assert valid_until - created == timedelta(days=30)

    response = await client.get("/api/v1/prescriptions", headers=patient_headers)
    assert [p["id"] for p in response.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_prescription_requires_medication(
    client: AsyncClient, doctor: dict, doctor_headers: dict, patient_headers: dict
) -> None:
    appointment = await booked_appointment(client, doctor, patient_headers)

    response = await client.post(
        "/api/v1/prescriptions",
        json={"appointment_id": appointment["id"], "medications": []},
        headers=doctor_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_prescription_for_other_doctors_appointment(
    client: AsyncClient,
    db_session: AsyncSession,
    doctor: dict,
    patient_headers: dict,
) -> None:
    appointment = await booked_appointment(client, doctor, patient_headers)
    other_doctor = await create_member(
        db_session, "other.doctor@example.com", "Dr. Other", is_doctor=True
    )

    response = await client.post(
        "/api/v1/prescriptions",
        json={"appointment_id": appointment["id"], "medications": MEDICATIONS},
        headers=bearer(other_doctor),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_prescription_unknown_appointment(
    client: AsyncClient, doctor_headers: dict
) -> None:
    response = await client.post(
        "/api/v1/prescriptions",
        json={"appointment_id": str(uuid4()), "medications": MEDICATIONS},
        headers=doctor_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patient_cannot_prescribe(
    client: AsyncClient, doctor: dict, patient_headers: dict
) -> None:
    appointment = await booked_appointment(client, doctor, patient_headers)

    response = await client.post(
        "/api/v1/prescriptions",
        json={"appointment_id": appointment["id"], "medications": MEDICATIONS},
        headers=patient_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_health_records(client: AsyncClient, patient_headers: dict) -> None:
    """Records list newest first and filter by type."""
    older = await client.post(
        "/api/v1/health-records",
        json={
            "record_type": "symptom",
            "title": "Cramps",
            "description": "Moderate cramps on day one",
            "record_date": "2024-03-01T08:00:00Z",
        },
        headers=patient_headers,
    )
    assert older.status_code == 201
    assert older.json()["metadata"] == {}

    newer = await client.post(
        "/api/v1/health-records",
        json={
            "record_type": "test",
            "title": "Blood panel",
            "description": "Iron slightly low",
            "record_date": "2024-04-01T08:00:00Z",
            "attachments": ["reports/blood-panel.pdf"],
            "metadata": {"ferritin": 12},
        },
        headers=patient_headers,
    )
    assert newer.status_code == 201

    response = await client.get("/api/v1/health-records", headers=patient_headers)
    assert [r["title"] for r in response.json()] == ["Blood panel", "Cramps"]

    response = await client.get(
        "/api/v1/health-records", params={"record_type": "symptom"}, headers=patient_headers
    )
    assert [r["title"] for r in response.json()] == ["Cramps"]


@pytest.mark.asyncio
async def test_health_record_defaults(client: AsyncClient, doctor_headers: dict) -> None:
    """Type defaults to general and the date to now."""
    response = await client.post(
        "/api/v1/health-records",
        json={"title": "Checkup", "description": "All fine"},
        headers=doctor_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["record_type"] == "general"
    assert data["record_date"] is not None


@pytest.mark.asyncio
async def test_health_record_rejects_unknown_type(
    client: AsyncClient, patient_headers: dict
) -> None:
    response = await client.post(
        "/api/v1/health-records",
        json={"record_type": "diet", "title": "Lunch", "description": "Salad"},
        headers=patient_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_record_types(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health-records/types")
    assert response.status_code == 200
    assert response.json()[0] == {"value": "general", "label": "General Health"}
    assert len(response.json()) == 5


@pytest.mark.asyncio
async def test_period_log_advances_last_period_date(
    client: AsyncClient,
    db_session: AsyncSession,
    patient: dict,
    patient_headers: dict,
) -> None:
    """Only a later start date moves the profile forward."""
    response = await client.post(
        "/api/v1/period-logs",
        json={"start_date": "2024-04-02", "end_date": "2024-04-06", "symptoms": ["cramps"]},
        headers=patient_headers,
    )
    assert response.status_code == 201

    await client.post(
        "/api/v1/period-logs", json={"start_date": "2024-03-01"}, headers=patient_headers
    )

    result = await db_session.execute(
        select(profiles.c.last_period_date).where(profiles.c.id == patient["id"])
    )
    assert result.scalar_one() == date(2024, 4, 2)

    response = await client.get("/api/v1/period-logs", headers=patient_headers)
    assert [log["start_date"] for log in response.json()] == ["2024-04-02", "2024-03-01"]


@pytest.mark.asyncio
async def test_period_log_defaults_to_today(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.post("/api/v1/period-logs", json={}, headers=patient_headers)
    assert response.status_code == 201
    assert response.json()["start_date"] == clinic_today().isoformat()


@pytest.mark.asyncio
async def test_period_log_end_before_start(client: AsyncClient, patient_headers: dict) -> None:
    response = await client.post(
        "/api/v1/period-logs",
        json={"start_date": "2024-04-06", "end_date": "2024-04-02"},
        headers=patient_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_period_log_end_before_default_start(
    client: AsyncClient, patient_headers: dict
) -> None:
    """An end date is checked against today when the start date is omitted."""
    end_date = clinic_today() - timedelta(days=5)

    response = await client.post(
        "/api/v1/period-logs", json={"end_date": end_date.isoformat()}, headers=patient_headers
    )
    assert response.status_code == 422

    response = await client.get("/api/v1/period-logs", headers=patient_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_period_log_invalidates_profile_after_commit(
    db_session: AsyncSession, patient: dict
) -> None:
    """The cached profile is dropped only once the new date is committed."""
    in_transaction_on_delete = []
    redis_client = MagicMock()
    redis_client.delete.side_effect = lambda key: in_transaction_on_delete.append(
        db_session.in_transaction()
    )

    await PeriodLogService(db_session, CacheManager(redis_client)).add_log(
        patient["id"], PeriodLogCreate(start_date=date(2024, 4, 2))
    )

    redis_client.delete.assert_called_once_with(f"profile:{patient['id']}")
    assert in_transaction_on_delete == [False]


@pytest.mark.asyncio
async def test_doctor_cannot_log_period(client: AsyncClient, doctor_headers: dict) -> None:
    response = await client.post("/api/v1/period-logs", json={}, headers=doctor_headers)
    assert response.status_code == 403
