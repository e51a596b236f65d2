import os
from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
load_dotenv()

# Settings are read at import time, so defaults must be in place first
os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite:///./hernest_test.db")
os.environ.setdefault("DATABASE_URL", os.environ["TEST_DATABASE_URL"])
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["CLINIC_TIMEZONE"] = "UTC"
os.environ["PAYMENT_PROCESSING_DELAY_SECONDS"] = "0"
os.environ["CHAT_REPLY_DELAY_SECONDS"] = "0"

from hernest.core.redis_client import get_redis_client  # noqa: E402
from hernest.database import get_async_database_url, get_db  # noqa: E402
from hernest.main import app  # noqa: E402
from hernest.models import metadata  # noqa: E402
from tests.factories import bearer, create_member  # noqa: E402

TEST_DATABASE_URL = get_async_database_url(os.environ["TEST_DATABASE_URL"])

# NullPool avoids sharing connections across event loops
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a fresh schema."""
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def mock_redis() -> MagicMock:
    """Redis stand-in that always misses."""
    redis_client = MagicMock()
    redis_client.get.return_value = None
    redis_client.exists.return_value = 0
    return redis_client


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, mock_redis: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: mock_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def doctor(db_session: AsyncSession) -> dict:
    """A doctor charging a consultation fee of 50."""
    return await create_member(
        db_session,
        "doctor@example.com",
        "Dr. Jane Smith",
        is_doctor=True,
        specialization="Gynecology",
        consultation_fee=Decimal("50.00"),
        years_of_experience=12,
    )


@pytest_asyncio.fixture
async def patient(db_session: AsyncSession) -> dict:
    """A patient with a 28 day cycle."""
    return await create_member(
        db_session,
        "patient@example.com",
        "Alex Patient",
        cycle_length=28,
    )


@pytest.fixture
def doctor_headers(doctor: dict) -> dict:
    return bearer(doctor)


@pytest.fixture
def patient_headers(patient: dict) -> dict:
    return bearer(patient)


@pytest.fixture
def card_details() -> dict:
    """Card that passes shape validation."""
    return {
        "card_number": "4242 4242 4242 4242",
        "expiry": "12/29",
        "cvc": "123",
        "cardholder_name": "Alex Patient",
    }
