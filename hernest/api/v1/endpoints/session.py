"""Session endpoint."""

from fastapi import APIRouter, status

from hernest.dependencies import CurrentSession
from hernest.schemas.auth import IdentityResponse
from hernest.schemas.session import SessionResponse

router = APIRouter()


@router.get(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Resolve the current session",
)
async def get_current_session(session: CurrentSession) -> SessionResponse:
    """
    Resolve the presented token into identity, profile and role.

    Never fails: a missing or invalid token yields the anonymous session and a
    profile that cannot be loaded is reported as absent.
    """
    return SessionResponse(
        authenticated=session.authenticated,
        identity=IdentityResponse.model_validate(session.identity) if session.identity else None,
        profile=session.profile,
        is_doctor=session.is_doctor,
        dashboard=session.dashboard,
        navigation=session.navigation,
    )
