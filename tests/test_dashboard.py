"""Tests for the doctor and patient dashboards."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from hernest.models import appointments, period_logs
from hernest.schemas.profiles import DoctorProfile, PatientProfile
from hernest.services.dashboard_service import DashboardService
from tests.factories import bearer, create_member

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


async def add_appointment(
    db_session: AsyncSession,
    doctor: dict,
    patient: dict,
    scheduled_for: datetime,
    status: str = "pending",
    payment_status: str = "pending",
    amount: str = "50.00",
):
    result = await db_session.execute(
        insert(appointments)
        .values(
            doctor_id=doctor["id"],
            patient_id=patient["id"],
            scheduled_for=scheduled_for,
            status=status,
            payment_status=payment_status,
            payment_amount=Decimal(amount),
        )
        .returning(appointments.c.id)
    )
    await db_session.commit()
    return result.scalar_one()


def doctor_profile(doctor: dict) -> DoctorProfile:
    return DoctorProfile(id=doctor["id"], full_name=doctor["full_name"])


@pytest.mark.asyncio
async def test_today_and_upcoming_buckets(
    db_session: AsyncSession, doctor: dict, patient: dict
) -> None:
    """The buckets are independent filters over the same list."""
    earlier_today = await add_appointment(db_session, doctor, patient, NOW - timedelta(hours=2))
    later_today = await add_appointment(db_session, doctor, patient, NOW + timedelta(hours=3))
    tomorrow = await add_appointment(db_session, doctor, patient, NOW + timedelta(days=1))
    await add_appointment(db_session, doctor, patient, NOW - timedelta(days=1))

    dashboard = await DashboardService(db_session).doctor_dashboard(doctor_profile(doctor), NOW)

    assert [a.id for a in dashboard.today] == [earlier_today, later_today]
    assert [a.id for a in dashboard.upcoming] == [later_today, tomorrow]


@pytest.mark.asyncio
async def test_doctor_stats(db_session: AsyncSession, doctor: dict, patient: dict) -> None:
    """Patients are counted once; only completed payments are earnings."""
    second = await create_member(db_session, "second@example.com", "Second Patient")
    third = await create_member(db_session, "third@example.com", "Third Patient")

    await add_appointment(
        db_session, doctor, patient, NOW, status="confirmed", payment_status="completed"
    )
    await add_appointment(db_session, doctor, patient, NOW + timedelta(days=1))
    await add_appointment(db_session, doctor, second, NOW + timedelta(days=2), amount="30.00")
    await add_appointment(db_session, doctor, third, NOW + timedelta(days=3), status="cancelled")

    stats = await DashboardService(db_session).doctor_stats(doctor["id"])

    assert stats.total_patients == 2
    assert stats.total_earnings == Decimal("50.00")
    assert stats.pending_appointments == 2


@pytest.mark.asyncio
async def test_doctor_stats_without_appointments(db_session: AsyncSession, doctor: dict) -> None:
    stats = await DashboardService(db_session).doctor_stats(doctor["id"])

    assert stats.total_patients == 0
    assert stats.total_earnings == Decimal("0")
    assert stats.pending_appointments == 0


@pytest.mark.asyncio
async def test_patient_dashboard(db_session: AsyncSession, doctor: dict, patient: dict) -> None:
    """Logs newest first, distinct logged dates and profile cycle data."""
    for start in (date(2024, 3, 1), date(2024, 4, 2), date(2024, 4, 2)):
        await db_session.execute(
            insert(period_logs).values(user_id=patient["id"], start_date=start)
        )
    await db_session.commit()
    await add_appointment(db_session, doctor, patient, NOW + timedelta(days=2))

    profile = PatientProfile(
        id=patient["id"], cycle_length=28, last_period_date=date(2024, 4, 2)
    )
    dashboard = await DashboardService(db_session).patient_dashboard(patient["id"], profile)

    assert [log.start_date for log in dashboard.period_logs] == [
        date(2024, 4, 2),
        date(2024, 4, 2),
        date(2024, 3, 1),
    ]
    assert dashboard.logged_dates == [date(2024, 3, 1), date(2024, 4, 2)]
    assert dashboard.appointments[0].doctor_name == "Dr. Jane Smith"
    assert dashboard.cycle_length == 28
    assert dashboard.last_period_date == date(2024, 4, 2)


@pytest.mark.asyncio
async def test_patient_dashboard_without_profile(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    """A missing profile still renders, without cycle data."""
    member = await create_member(
        db_session, "ghost@example.com", "Ghost", with_profile=False
    )

    response = await client.get("/api/v1/dashboard/patient", headers=bearer(member))
    assert response.status_code == 200
    data = response.json()
    assert data["period_logs"] == []
    assert data["appointments"] == []
    assert data["last_period_date"] is None
    assert data["cycle_length"] is None


@pytest.mark.asyncio
async def test_doctor_cannot_open_patient_dashboard(
    client: AsyncClient, doctor_headers: dict
) -> None:
    response = await client.get("/api/v1/dashboard/patient", headers=doctor_headers)
    assert response.status_code == 403
