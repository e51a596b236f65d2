"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class Token(BaseModel):
    """JWT token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Token refresh request schema."""

    refresh_token: str


class SignUpRequest(BaseModel):
    """Account creation request."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=200)
    is_doctor: bool = False


class SignInRequest(BaseModel):
    """Email and password sign-in request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class IdentityResponse(BaseModel):
    """Signed-in identity as mirrored from the identities table."""

    id: UUID
    email: EmailStr
    is_doctor: bool
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None

    model_config = {"from_attributes": True}


class SignUpResponse(BaseModel):
    """Account creation response."""

    identity: IdentityResponse
    message: str = "Account created successfully! You can now sign in."


class LoginResponse(BaseModel):
    """Login response with tokens and identity."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    identity: IdentityResponse
