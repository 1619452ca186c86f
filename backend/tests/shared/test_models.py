"""Tests for shared/models.py."""

import pytest
from pydantic import ValidationError

from shared.models import AuthenticatedUser


class TestAuthenticatedUser:
    def test_minimal_user(self):
        user = AuthenticatedUser(id="user-123")
        assert user.email == ""
        assert user.email_verified is False
        assert user.last_sign_in is None

    def test_is_frozen(self):
        user = AuthenticatedUser(id="user-123", email="a@example.com")
        with pytest.raises(ValidationError):
            user.email = "b@example.com"

    def test_ignores_extra_fields(self):
        user = AuthenticatedUser(id="user-123", role="authenticated")
        assert not hasattr(user, "role")
