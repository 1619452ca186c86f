"""Tests for the profile repository."""

from unittest.mock import MagicMock

import pytest

from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.models import ProfileUpdate, SubscriptionTier
from modules.profiles.repository import ProfileRepository
from tests.conftest import make_profile_row


class TestProfileRepository:
    def test_get_filters_on_id(self, user_db):
        profile = ProfileRepository(user_db).get("test-user-123")

        user_db.table.assert_called_once_with("profiles")
        user_db.table.return_value.select.return_value.eq.assert_called_once_with(
            "id", "test-user-123"
        )
        assert profile.display_name == "Test User"
        assert profile.subscription_tier == SubscriptionTier.FREE

    def test_get_missing(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = []
        assert ProfileRepository(db).get("test-user-123") is None

    def test_display_name_falls_back_to_email(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [
            make_profile_row(full_name=None, email="jo@example.com")
        ]
        assert ProfileRepository(db).get("test-user-123").display_name == "jo"

    def test_update_sends_only_set_fields(self):
        db = MagicMock()
        update = db.table.return_value.update
        update.return_value.eq.return_value.execute.return_value.data = [
            make_profile_row(full_name="Renamed")
        ]

        profile = ProfileRepository(db).update("test-user-123", ProfileUpdate(full_name="Renamed"))

        update.assert_called_once_with({"full_name": "Renamed"})
        update.return_value.eq.assert_called_once_with("id", "test-user-123")
        assert profile.full_name == "Renamed"

    def test_update_invisible_row(self):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value.data = []

        with pytest.raises(ProfileNotFoundError):
            ProfileRepository(db).update("test-user-123", ProfileUpdate(onboarding_completed=True))

    def test_empty_update_reads_current_row(self, user_db):
        profile = ProfileRepository(user_db).update("test-user-123", ProfileUpdate())
        user_db.table.return_value.update.assert_not_called()
        assert profile.id == "test-user-123"

    def test_tier_is_not_user_editable(self):
        with pytest.raises(ValueError):
            ProfileUpdate(subscription_tier="premium")

    @pytest.mark.parametrize("field", ["onboarding_completed", "preferences"])
    def test_not_null_fields_reject_null(self, field):
        with pytest.raises(ValueError):
            ProfileUpdate(**{field: None})
