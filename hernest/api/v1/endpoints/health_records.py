"""Health record endpoints."""

from fastapi import APIRouter, Query, status

from hernest.dependencies import CurrentProfile, DatabaseSession
from hernest.schemas.health_records import (
    RECORD_TYPE_LABELS,
    HealthRecordCreate,
    HealthRecordResponse,
    RecordType,
    RecordTypeOption,
)
from hernest.services.health_record_service import HealthRecordService

router = APIRouter()


@router.get(
    "/types",
    response_model=list[RecordTypeOption],
    status_code=status.HTTP_200_OK,
    summary="List record types",
)
async def list_record_types() -> list[RecordTypeOption]:
    return [
        RecordTypeOption(value=value, label=label) for value, label in RECORD_TYPE_LABELS.items()
    ]


@router.post(
    "",
    response_model=HealthRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a health record",
)
async def add_health_record(
    data: HealthRecordCreate,
    profile: CurrentProfile,
    db: DatabaseSession,
) -> HealthRecordResponse:
    """
    Add a record to the caller's health log.

    Args:
        data: Record type, title, description and optional extras
        profile: Owner of the record
        db: Database session

    Returns:
        Created record
    """
    return await HealthRecordService(db).add_record(profile.id, data)


@router.get(
    "",
    response_model=list[HealthRecordResponse],
    status_code=status.HTTP_200_OK,
    summary="List my health records",
)
async def list_health_records(
    profile: CurrentProfile,
    db: DatabaseSession,
    record_type: RecordType | None = Query(None),
) -> list[HealthRecordResponse]:
    """The caller's records, most recent first."""
    return await HealthRecordService(db).list_records(profile.id, record_type)
