"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

import time
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from shared.models import AuthenticatedUser


class TokenStatus(str, Enum):
    """Outcome of presenting an access token to the credential store."""

    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth access tokens.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")
    session_id: Optional[str] = Field(None, description="Supabase session ID")

    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)


class TokenCheck(BaseModel):
    """Result of validating an access token."""

    status: TokenStatus
    user: Optional[AuthenticatedUser] = None

    model_config = {"frozen": True}


class Session(BaseModel):
    """
    The credential pair for one signed-in user.

    Mirrored into transport-only cookies by the session codec and never
    persisted anywhere else.
    """

    access_token: str = Field(..., description="Short-lived access credential")
    refresh_token: str = Field(..., description="Longer-lived refresh credential")
    expires_at: Optional[int] = Field(None, description="Access token expiry (unix seconds)")
    user: Optional[AuthenticatedUser] = Field(None, description="User the session belongs to")

    model_config = {"frozen": True}

    def is_expired(self, margin: int = 0, now: Optional[float] = None) -> bool:
        """True when the access token expires within `margin` seconds."""
        if self.expires_at is None:
            return False
        current = time.time() if now is None else now
        return self.expires_at - margin <= current


class AuthResult(BaseModel):
    """
    Outcome of a sign-in, sign-up or code exchange.

    session is None when the provider requires email confirmation before
    issuing credentials. code_verifier is set when a PKCE email-link flow
    was started and must survive until the callback.
    """

    session: Optional[Session] = None
    user: Optional[AuthenticatedUser] = None
    code_verifier: Optional[str] = None


class AuthEventType(str, Enum):
    """Session change notifications, mirroring Supabase auth events."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


class AuthEvent(BaseModel):
    """A session change delivered to AuthEventBus subscribers."""

    type: AuthEventType
    session: Optional[Session] = None

    model_config = {"frozen": True}


# -----------------------------------------------------------------------------
# Request models (validated before any remote call)
# -----------------------------------------------------------------------------


class SignInRequest(BaseModel):
    """Credentials submitted to POST /login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    """Registration form submitted to POST /signup."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    full_name: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="after")
    def blank_name_is_none(self) -> "SignUpRequest":
        if self.full_name is not None and not self.full_name.strip():
            self.full_name = None
        return self


class PasswordResetRequest(BaseModel):
    """Email address submitted to POST /forgot-password."""

    email: EmailStr


class NewPasswordRequest(BaseModel):
    """New password submitted to POST /reset-password."""

    password: str = Field(..., min_length=6, max_length=72)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "NewPasswordRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
