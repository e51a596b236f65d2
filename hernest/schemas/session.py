"""Session schemas."""

from enum import Enum

from pydantic import BaseModel

from hernest.schemas.auth import IdentityResponse
from hernest.schemas.profiles import Profile


class Dashboard(str, Enum):
    """Dashboard variant mounted for a signed-in identity."""

    DOCTOR = "doctor"
    PATIENT = "patient"


class SessionResponse(BaseModel):
    """Resolved session for the presenting client."""

    authenticated: bool
    identity: IdentityResponse | None = None
    profile: Profile | None = None
    is_doctor: bool = False
    dashboard: Dashboard | None = None
    navigation: list[str]
