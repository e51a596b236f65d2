"""Database models."""

from hernest.models.appointments import appointments
from hernest.models.health_records import health_records
from hernest.models.identities import identities
from hernest.models.metadata import metadata
from hernest.models.period_logs import period_logs
from hernest.models.prescriptions import prescriptions
from hernest.models.profiles import profiles

__all__ = [
    "appointments",
    "health_records",
    "identities",
    "metadata",
    "period_logs",
    "prescriptions",
    "profiles",
]
