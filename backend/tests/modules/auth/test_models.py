"""Tests for auth module models."""

import pytest
from pydantic import ValidationError

from modules.auth.models import (
    AuthEvent,
    AuthEventType,
    NewPasswordRequest,
    Session,
    SignInRequest,
    SignUpRequest,
)


class TestSession:
    def test_is_expired(self):
        session = Session(access_token="a", refresh_token="r", expires_at=1000)
        assert session.is_expired(now=1000)
        assert not session.is_expired(now=999)
        assert session.is_expired(margin=10, now=990)

    def test_without_expiry_never_expires(self):
        session = Session(access_token="a", refresh_token="r")
        assert not session.is_expired(now=10**12)

    def test_is_frozen(self):
        session = Session(access_token="a", refresh_token="r")
        with pytest.raises(ValidationError):
            session.access_token = "b"


class TestRequests:
    def test_sign_in_rejects_bad_email(self):
        with pytest.raises(ValidationError):
            SignInRequest(email="not-an-email", password="x")

    def test_sign_in_requires_password(self):
        with pytest.raises(ValidationError):
            SignInRequest(email="a@example.com", password="")

    def test_sign_up_password_length(self):
        with pytest.raises(ValidationError):
            SignUpRequest(email="a@example.com", password="12345")
        with pytest.raises(ValidationError):
            SignUpRequest(email="a@example.com", password="x" * 73)

    def test_sign_up_blank_name_is_none(self):
        request = SignUpRequest(email="a@example.com", password="secret1", full_name="   ")
        assert request.full_name is None

    def test_new_password_must_match(self):
        with pytest.raises(ValidationError, match="Passwords do not match"):
            NewPasswordRequest(password="secret1", confirm_password="secret2")
        request = NewPasswordRequest(password="secret1", confirm_password="secret1")
        assert request.password == "secret1"


class TestAuthEvent:
    def test_signed_out_has_no_session(self):
        event = AuthEvent(type=AuthEventType.SIGNED_OUT)
        assert event.session is None
        assert event.type.value == "SIGNED_OUT"
