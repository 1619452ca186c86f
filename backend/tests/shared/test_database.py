"""Tests for shared/database.py."""

import pytest
from unittest.mock import patch, MagicMock

from shared.database import create_auth_client, get_supabase_user_client


def _configure(mock_settings, url="https://test.supabase.co", anon_key="test-anon-key"):
    mock_settings.return_value.supabase_url = url
    mock_settings.return_value.supabase_anon_key = anon_key


class TestAuthClient:
    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_uses_anon_key_without_persistence(self, mock_settings, mock_create):
        """Auth clients never persist or auto-refresh sessions."""
        _configure(mock_settings)
        mock_settings.return_value.supabase_service_role_key = "service-key"
        mock_create.return_value = MagicMock()

        create_auth_client()

        args, kwargs = mock_create.call_args
        assert args == ("https://test.supabase.co", "test-anon-key")
        options = kwargs["options"]
        assert options.persist_session is False
        assert options.auto_refresh_token is False
        assert options.flow_type == "pkce"

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_passes_storage_through(self, mock_settings, mock_create):
        _configure(mock_settings)
        storage = MagicMock()

        create_auth_client(storage=storage)

        assert mock_create.call_args.kwargs["options"].storage is storage

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_creates_fresh_client_per_call(self, mock_settings, mock_create):
        _configure(mock_settings)
        mock_create.side_effect = [MagicMock(name="client1"), MagicMock(name="client2")]

        assert create_auth_client() is not create_auth_client()
        assert mock_create.call_count == 2

    @patch("shared.database.get_settings")
    def test_raises_without_config(self, mock_settings):
        """Should raise if configuration is missing."""
        _configure(mock_settings, url="", anon_key="")

        with pytest.raises(RuntimeError, match="configuration missing"):
            create_auth_client()


class TestSupabaseUserClient:
    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_user_client_creates_client(self, mock_settings, mock_create):
        """Should create client with anon key and the user's token on PostgREST."""
        _configure(mock_settings)
        mock_client = MagicMock()
        mock_create.return_value = mock_client

        client = get_supabase_user_client("user-access-token")

        assert mock_create.call_args.args == ("https://test.supabase.co", "test-anon-key")
        mock_client.postgrest.auth.assert_called_once_with("user-access-token")
        assert client is mock_client

    @patch("shared.database.get_settings")
    def test_get_supabase_user_client_raises_without_key(self, mock_settings):
        """Should raise if the anon key is missing."""
        _configure(mock_settings, anon_key="")

        with pytest.raises(RuntimeError, match="configuration missing"):
            get_supabase_user_client("token")
