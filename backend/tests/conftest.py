"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import itertools
import time
from datetime import datetime, timezone, timedelta
from typing import Optional
from unittest.mock import MagicMock

import jwt  # PyJWT
import pytest

from api.dependencies import get_container, reset_container
from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser
from modules.auth.codec import CookieJar, SessionCodec
from modules.auth.exceptions import (
    AuthRequestRejectedError,
    CredentialRejectedError,
    CredentialStoreUnavailableError,
    InvalidCredentialsError,
)
from modules.auth.models import AuthResult, Session, TokenCheck, TokenStatus


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    expires_in: int = 3600,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test JWT token shaped like a Supabase access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates a token that expired an hour ago
        expires_in: Seconds until expiry for unexpired tokens
        secret: Signing secret
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(seconds=expires_in)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": {"email_verified": True},
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeCredentialStore:
    """
    In-memory ICredentialStore.

    Issues opaque token pairs, expires access tokens after `ttl` seconds
    and invalidates a refresh token the moment it is rotated.
    """

    def __init__(self) -> None:
        self.ttl = 3600
        self.unavailable = False
        self.require_confirmation = False
        self.users: dict[str, tuple[str, AuthenticatedUser]] = {}
        self.access: dict[str, tuple[AuthenticatedUser, int]] = {}
        self.refresh: dict[str, AuthenticatedUser] = {}
        self.codes: dict[str, AuthenticatedUser] = {}
        self.calls: list[str] = []
        self.exchanged_verifiers: list[Optional[str]] = []
        self.passwords_updated: list[str] = []
        self._ids = itertools.count(1)

    def add_user(
        self,
        email: str = "test@example.com",
        password: str = "secret123",
        user_id: str = "test-user-123",
    ) -> AuthenticatedUser:
        user = AuthenticatedUser(id=user_id, email=email, email_verified=True)
        self.users[email] = (password, user)
        return user

    def issue(self, user: AuthenticatedUser) -> Session:
        n = next(self._ids)
        expires_at = int(time.time()) + self.ttl
        session = Session(
            access_token=f"access-{n}",
            refresh_token=f"refresh-{n}",
            expires_at=expires_at,
            user=user,
        )
        self.access[session.access_token] = (user, expires_at)
        self.refresh[session.refresh_token] = user
        return session

    def revoke_all(self) -> None:
        self.access.clear()
        self.refresh.clear()

    def _check_available(self, operation: str) -> None:
        self.calls.append(operation)
        if self.unavailable:
            raise CredentialStoreUnavailableError(operation)

    async def validate(self, access_token: str) -> TokenCheck:
        self._check_available("validate")
        entry = self.access.get(access_token)
        if entry is None:
            return TokenCheck(status=TokenStatus.INVALID)
        user, expires_at = entry
        if expires_at <= time.time():
            return TokenCheck(status=TokenStatus.EXPIRED)
        return TokenCheck(status=TokenStatus.VALID, user=user)

    async def rotate(self, refresh_token: str) -> Session:
        self._check_available("rotate")
        user = self.refresh.pop(refresh_token, None)
        if user is None:
            raise CredentialRejectedError("Invalid Refresh Token: Already Used")
        return self.issue(user)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        self._check_available("sign_in")
        entry = self.users.get(email)
        if entry is None or entry[0] != password:
            raise InvalidCredentialsError()
        session = self.issue(entry[1])
        return AuthResult(session=session, user=entry[1])

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> AuthResult:
        self._check_available("sign_up")
        if email in self.users:
            raise AuthRequestRejectedError("User already registered")
        user = self.add_user(email, password, user_id=f"user-{next(self._ids)}")
        if self.require_confirmation:
            self.codes["signup-code"] = user
            return AuthResult(user=user, code_verifier="verifier-signup")
        session = self.issue(user)
        return AuthResult(session=session, user=user)

    async def sign_out(self, access_token: str) -> None:
        self._check_available("sign_out")
        entry = self.access.pop(access_token, None)
        if entry is None:
            raise CredentialRejectedError("Session not found")
        for token, user in list(self.refresh.items()):
            if user.id == entry[0].id:
                del self.refresh[token]

    async def reset_password(self, email: str) -> Optional[str]:
        self._check_available("reset_password")
        if email in self.users:
            self.codes["recovery-code"] = self.users[email][1]
        return "verifier-recovery"

    async def update_password(self, session: Session, new_password: str) -> AuthenticatedUser:
        self._check_available("update_password")
        user = session.user
        self.users[user.email] = (new_password, user)
        self.passwords_updated.append(user.email)
        return user

    async def exchange_code(self, code: str, code_verifier: Optional[str] = None) -> Session:
        self._check_available("exchange_code")
        self.exchanged_verifiers.append(code_verifier)
        user = self.codes.pop(code, None)
        if user is None:
            raise CredentialRejectedError("invalid flow state, no valid flow state found")
        return self.issue(user)


def make_profile_row(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    full_name: Optional[str] = "Test User",
) -> dict:
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": user_id,
        "email": email,
        "full_name": full_name,
        "subscription_tier": "free",
        "onboarding_completed": False,
        "preferences": {},
        "created_at": now,
        "updated_at": now,
    }


def make_expense_row(
    expense_id: str = "expense-1",
    user_id: str = "test-user-123",
    amount: float = 12.5,
    category: str = "Food",
    note: Optional[str] = "Lunch",
    day: str = "2026-10-01",
) -> dict:
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": expense_id,
        "user_id": user_id,
        "amount": amount,
        "category": category,
        "note": note,
        "date": day,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture(autouse=True)
def reset_services():
    """Reset the service container and cached settings around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with no Supabase project configured."""
    return Settings(
        _env_file=None,
        supabase_url="",
        supabase_anon_key="",
        supabase_jwt_secret="",
    )


@pytest.fixture
def codec(settings: Settings) -> SessionCodec:
    return SessionCodec(settings)


@pytest.fixture
def jar() -> CookieJar:
    return CookieJar()


@pytest.fixture
def fake_store() -> FakeCredentialStore:
    store = FakeCredentialStore()
    store.add_user()
    return store


@pytest.fixture
def installed_store(fake_store: FakeCredentialStore) -> FakeCredentialStore:
    """Fake store wired into the service container the app uses."""
    get_container().credential_store = fake_store
    return fake_store


@pytest.fixture
def user_db() -> MagicMock:
    """User-scoped Supabase client mock serving one profile row."""
    db = MagicMock()
    db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [
        make_profile_row()
    ]
    return db


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"
