"""Period log endpoints."""

from fastapi import APIRouter, status

from hernest.dependencies import CacheManagerDep, CurrentPatient, DatabaseSession
from hernest.schemas.period_logs import PeriodLogCreate, PeriodLogResponse
from hernest.services.period_log_service import PeriodLogService

router = APIRouter()


@router.post(
    "",
    response_model=PeriodLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a cycle",
)
async def add_period_log(
    data: PeriodLogCreate,
    patient: CurrentPatient,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> PeriodLogResponse:
    """
    Log the start (and optionally the end) of a cycle.

    A start date later than the profile's last period date moves it forward.

    Args:
        data: Start date (defaults to today) and optional details
        patient: Caller
        db: Database session
        cache_manager: Cache manager

    Returns:
        Created log
    """
    return await PeriodLogService(db, cache_manager).add_log(patient.id, data)


@router.get(
    "",
    response_model=list[PeriodLogResponse],
    status_code=status.HTTP_200_OK,
    summary="List my period logs",
)
async def list_period_logs(patient: CurrentPatient, db: DatabaseSession) -> list[PeriodLogResponse]:
    """The caller's logs, most recent start first."""
    return await PeriodLogService(db).list_logs(patient.id)
