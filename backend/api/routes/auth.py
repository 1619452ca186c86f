"""
Authentication endpoints.

Sign-in, sign-up, password recovery, the email-link callback and sign-out.
Every handler works through SessionState, which writes session changes
into the request's cookie jar; the session middleware puts them on the
response.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from shared.config import get_settings
from shared.exceptions import AuthenticationError, ExternalServiceError
from shared.models import AuthenticatedUser
from modules.auth.models import (
    NewPasswordRequest,
    PasswordResetRequest,
    SignInRequest,
    SignUpRequest,
)
from modules.auth.state import SessionState
from ..dependencies import get_session_state, require_session
from ..models.errors import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()

CALLBACK_ERROR = "auth_callback_failed"


class AuthPageResponse(BaseModel):
    """What an auth page needs to render: its name and any banner text."""

    page: str
    error: Optional[str] = None


class SignedInResponse(BaseModel):
    user: AuthenticatedUser


class SignUpResponse(BaseModel):
    user: Optional[AuthenticatedUser] = None
    confirmation_required: bool


class MessageResponse(BaseModel):
    message: str


def _safe_next(next_path: Optional[str], default: str) -> str:
    """Only same-site absolute paths are accepted as redirect targets."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return default
    return next_path


@router.get("/login", response_model=AuthPageResponse)
async def login_page(error: Optional[str] = Query(default=None)) -> AuthPageResponse:
    return AuthPageResponse(page="login", error=error)


@router.post(
    "/login",
    response_model=SignedInResponse,
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def sign_in(
    request: SignInRequest,
    state: SessionState = Depends(get_session_state),
) -> SignedInResponse:
    """
    Sign in with email and password.

    Sets the session cookies on success.
    """
    session = await state.sign_in(request.email, request.password)
    return SignedInResponse(user=session.user)


@router.get("/signup", response_model=AuthPageResponse)
async def signup_page() -> AuthPageResponse:
    return AuthPageResponse(page="signup")


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def sign_up(
    request: SignUpRequest,
    state: SessionState = Depends(get_session_state),
) -> SignUpResponse:
    """
    Register a new account.

    The profile row is created by the database on sign-up. When the
    project requires email confirmation no session is issued yet and
    confirmation_required is true.
    """
    result = await state.sign_up(request.email, request.password, request.full_name)
    return SignUpResponse(user=result.user, confirmation_required=result.session is None)


@router.get("/forgot-password", response_model=AuthPageResponse)
async def forgot_password_page() -> AuthPageResponse:
    return AuthPageResponse(page="forgot-password")


@router.post("/forgot-password", response_model=MessageResponse)
async def request_password_reset(
    request: PasswordResetRequest,
    state: SessionState = Depends(get_session_state),
) -> MessageResponse:
    """Send a recovery email. The answer does not reveal whether the account exists."""
    await state.request_password_reset(request.email)
    return MessageResponse(message="If an account exists for that email, a reset link is on its way.")


@router.get("/reset-password", response_model=AuthPageResponse)
async def reset_password_page() -> AuthPageResponse:
    return AuthPageResponse(page="reset-password")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}},
)
async def set_new_password(
    request: NewPasswordRequest,
    state: SessionState = Depends(require_session),
) -> MessageResponse:
    """
    Set a new password.

    Requires a session, normally the one the recovery link's callback
    established.
    """
    await state.set_new_password(request.password)
    return MessageResponse(message="Password updated.")


@router.get("/auth/callback")
async def auth_callback(
    code: Optional[str] = Query(default=None),
    next_path: Optional[str] = Query(default=None, alias="next"),
    state: SessionState = Depends(get_session_state),
) -> RedirectResponse:
    """
    Exchange the one-time code from an email link for a session.

    Redirects to `next` (same-site paths only) or home on success and to
    the login page with an error flag otherwise.
    """
    settings = get_settings()
    failure = RedirectResponse(f"{settings.login_path}?error={CALLBACK_ERROR}", status_code=303)
    if not code:
        return failure

    target = _safe_next(next_path, settings.home_path)
    try:
        await state.exchange_code(code, recovery=target == "/reset-password")
    except (AuthenticationError, ExternalServiceError) as e:
        logger.info("Auth callback failed: %s", e.message)
        return failure
    return RedirectResponse(target, status_code=303)


@router.post("/auth/signout")
async def sign_out(state: SessionState = Depends(get_session_state)) -> RedirectResponse:
    """Revoke the session, clear the cookies and return to the login page."""
    await state.sign_out()
    return RedirectResponse(get_settings().login_path, status_code=303)
