"""
Credential store backed by Supabase Auth.

Wraps the synchronous Supabase auth client behind ICredentialStore. Each
call runs in a worker thread under a bounded timeout, and every call uses
a fresh client so no session is ever held in process memory.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import jwt
from supabase import AuthApiError

from shared.config import Settings, get_settings
from shared.database import create_auth_client
from shared.models import AuthenticatedUser

from .interfaces import ICredentialStore
from .models import AuthResult, JWTPayload, Session, TokenCheck, TokenStatus
from .exceptions import (
    AuthRequestRejectedError,
    CredentialRejectedError,
    CredentialStoreUnavailableError,
    InvalidCredentialsError,
)

logger = logging.getLogger(__name__)


class _VerifierCapture:
    """Auth client storage that keeps the PKCE code verifier readable."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    @property
    def code_verifier(self) -> Optional[str]:
        for key, value in self._items.items():
            if key.endswith("-code-verifier"):
                return value
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _user_from_provider(user: Any) -> Optional[AuthenticatedUser]:
    """Map a Supabase auth User object onto AuthenticatedUser."""
    if user is None:
        return None
    return AuthenticatedUser(
        id=str(user.id),
        email=getattr(user, "email", None) or "",
        email_verified=getattr(user, "email_confirmed_at", None) is not None,
        last_sign_in=_parse_datetime(getattr(user, "last_sign_in_at", None)),
    )


def _user_from_claims(payload: JWTPayload) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=payload.sub,
        email=payload.email or "",
        email_verified=bool(payload.user_metadata.get("email_verified", False)),
        last_sign_in=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
    )


def _session_from_provider(session: Any) -> Session:
    return Session(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=getattr(session, "expires_at", None),
        user=_user_from_provider(getattr(session, "user", None)),
    )


class SupabaseCredentialStore(ICredentialStore):
    """
    Implementation of the credential store on Supabase Auth.

    Access tokens are verified locally with the project's JWT secret when
    one is configured; otherwise Supabase is asked about the token.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Callable[..., Any] = create_auth_client,
    ):
        self._settings = settings or get_settings()
        self._client_factory = client_factory

    def _client(self, operation: str, **kwargs: Any) -> Any:
        """Build a throwaway auth client; a misconfigured project counts as an outage."""
        try:
            return self._client_factory(**kwargs)
        except Exception as e:
            logger.error("Cannot create Supabase auth client: %s", e)
            raise CredentialStoreUnavailableError(operation, "not configured") from e

    async def _call(
        self,
        operation: str,
        fn: Callable[..., Any],
        *args: Any,
        rejected: Callable[[str], Exception] = CredentialRejectedError,
    ) -> Any:
        """Run a blocking provider call with the configured timeout."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args),
                timeout=self._settings.auth_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise CredentialStoreUnavailableError(operation, "timed out") from e
        except AuthApiError as e:
            status = getattr(e, "status", 0) or 0
            if status >= 500:
                raise CredentialStoreUnavailableError(operation) from e
            raise rejected(getattr(e, "message", None) or str(e)) from e
        except Exception as e:
            # Transport failures surface as httpx errors or AuthRetryableError
            raise CredentialStoreUnavailableError(operation) from e

    async def validate(self, access_token: str) -> TokenCheck:
        """
        Classify an access token.

        Expiry is read from the claims before any signature work, so an
        expired token never leaves the process.
        """
        if not access_token:
            return TokenCheck(status=TokenStatus.INVALID)

        try:
            claims = jwt.decode(access_token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return TokenCheck(status=TokenStatus.INVALID)

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)):
            return TokenCheck(status=TokenStatus.INVALID)
        if exp - self._settings.refresh_margin_seconds <= time.time():
            return TokenCheck(status=TokenStatus.EXPIRED)

        if self._settings.supabase_jwt_secret:
            return self._verify_locally(access_token)

        client = self._client("validate")
        try:
            response = await self._call("validate", client.auth.get_user, access_token)
        except CredentialRejectedError:
            return TokenCheck(status=TokenStatus.INVALID)

        user = _user_from_provider(getattr(response, "user", None))
        if user is None:
            return TokenCheck(status=TokenStatus.INVALID)
        return TokenCheck(status=TokenStatus.VALID, user=user)

    def _verify_locally(self, access_token: str) -> TokenCheck:
        try:
            payload = jwt.decode(
                access_token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
            return TokenCheck(
                status=TokenStatus.VALID,
                user=_user_from_claims(JWTPayload(**payload)),
            )
        except jwt.ExpiredSignatureError:
            return TokenCheck(status=TokenStatus.EXPIRED)
        except jwt.InvalidTokenError:
            return TokenCheck(status=TokenStatus.INVALID)

    async def rotate(self, refresh_token: str) -> Session:
        if not refresh_token:
            raise CredentialRejectedError("Missing refresh token")

        client = self._client("rotate")
        response = await self._call("rotate", client.auth.refresh_session, refresh_token)
        if response is None or response.session is None:
            raise CredentialRejectedError("Refresh returned no session")
        return _session_from_provider(response.session)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        client = self._client("sign_in")
        response = await self._call(
            "sign_in",
            client.auth.sign_in_with_password,
            {"email": email, "password": password},
            rejected=InvalidCredentialsError,
        )
        if response.session is None:
            raise InvalidCredentialsError()
        session = _session_from_provider(response.session)
        return AuthResult(session=session, user=session.user)

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> AuthResult:
        storage = _VerifierCapture()
        client = self._client("sign_up", storage=storage)
        response = await self._call(
            "sign_up",
            client.auth.sign_up,
            {
                "email": email,
                "password": password,
                "options": {
                    "data": {"full_name": full_name},
                    "email_redirect_to": f"{self._settings.site_url}/auth/callback",
                },
            },
            rejected=AuthRequestRejectedError,
        )

        session = _session_from_provider(response.session) if response.session else None
        return AuthResult(
            session=session,
            user=_user_from_provider(response.user),
            code_verifier=None if session else storage.code_verifier,
        )

    async def sign_out(self, access_token: str) -> None:
        client = self._client("sign_out")
        await self._call("sign_out", client.auth.admin.sign_out, access_token)

    async def reset_password(self, email: str) -> Optional[str]:
        storage = _VerifierCapture()
        client = self._client("reset_password", storage=storage)
        redirect_to = f"{self._settings.site_url}/auth/callback?next=/reset-password"
        await self._call(
            "reset_password",
            client.auth.reset_password_for_email,
            email,
            {"redirect_to": redirect_to},
            rejected=AuthRequestRejectedError,
        )
        return storage.code_verifier

    async def update_password(self, session: Session, new_password: str) -> AuthenticatedUser:
        client = self._client("update_password")

        def _update() -> Any:
            client.auth.set_session(session.access_token, session.refresh_token)
            return client.auth.update_user({"password": new_password})

        response = await self._call("update_password", _update, rejected=AuthRequestRejectedError)
        user = _user_from_provider(getattr(response, "user", None))
        if user is None:
            raise AuthRequestRejectedError("Password update returned no user")
        return user

    async def exchange_code(self, code: str, code_verifier: Optional[str] = None) -> Session:
        if not code:
            raise CredentialRejectedError("Missing auth code")

        client = self._client("exchange_code")
        # Recovery flows may suffix the verifier with "/<flow type>"
        verifier = code_verifier.split("/", 1)[0] if code_verifier else ""
        response = await self._call(
            "exchange_code",
            client.auth.exchange_code_for_session,
            {"auth_code": code, "code_verifier": verifier, "redirect_to": ""},
        )
        if response is None or response.session is None:
            raise CredentialRejectedError("Code exchange returned no session")
        return _session_from_provider(response.session)

