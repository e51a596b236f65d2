"""Time helpers shared by scheduling code.

Timestamps are stored in UTC. Backends that drop the offset (SQLite) hand
back naive values, which are read as UTC.
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from hernest.config import settings


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def clinic_zone() -> ZoneInfo:
    """Time zone in which appointment dates and slots are expressed."""
    return ZoneInfo(settings.clinic_timezone)


def clinic_today(now: datetime | None = None) -> date:
    """Calendar date in the clinic time zone."""
    return as_utc(now or utcnow()).astimezone(clinic_zone()).date()


def clinic_date_of(value: datetime) -> date:
    """Calendar date of a stored timestamp in the clinic time zone."""
    return as_utc(value).astimezone(clinic_zone()).date()
