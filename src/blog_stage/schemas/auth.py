"""Authentication-related Pydantic schemas."""

from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"


def _normalize_email(value: str) -> str:
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as err:
        raise ValueError(INVALID_EMAIL_MESSAGE) from err
    return result.normalized


class EmailPayload(BaseModel):
    """Base payload carrying a validated email address."""

    email: str = Field(..., description="Account email address")

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _normalize_email(value)


class LoginRequest(EmailPayload):
    """Email and password sign-in."""

    password: str = Field(..., description="Account password (min 6 characters)")

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class SignupRequest(LoginRequest):
    """Account registration."""


class MagicLinkRequest(EmailPayload):
    """Request a passwordless sign-in link."""

    redirect_to: str | None = Field(None, description="Site path to land on after sign-in")


class VerifyOtpRequest(EmailPayload):
    """Exchange an emailed one-time code for a session."""

    token: str = Field(..., min_length=1, description="One-time code from the email")


class RefreshRequest(BaseModel):
    """Explicit refresh; the refresh-token cookie is used when omitted."""

    refresh_token: str | None = None


class UserResponse(BaseModel):
    """The signed-in user."""

    id: str
    email: str | None = None
    role: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str | None = None


class SessionResponse(BaseModel):
    """Tokens returned after a successful sign-in or refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: int
    user: UserResponse


class SignupResponse(BaseModel):
    """Registration result; no session is issued until the email is confirmed."""

    user: UserResponse | None = None
    session: SessionResponse | None = None
    confirmation_required: bool
    message: str
