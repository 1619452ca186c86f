"""
Supabase client factory.

Every client built here uses the public anon key. Auth clients are created
per call because a Supabase client holds the session of whoever signed in
through it; data clients carry the caller's access token so Row Level
Security applies to every query.

No factory in this module uses the service-role key.
"""

from typing import Any, Optional
from supabase import create_client, Client, ClientOptions

from .config import get_settings


def _require_public_config() -> tuple[str, str]:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )
    return settings.supabase_url, settings.supabase_anon_key


def create_auth_client(storage: Optional[Any] = None) -> Client:
    """
    Create a throwaway Supabase client for a single auth operation.

    Sessions are neither persisted nor auto-refreshed by the client;
    the cookie jar is the only place a session lives.

    Args:
        storage: Optional storage object (get_item/set_item/remove_item)
            used to capture PKCE code verifiers.

    Returns:
        Supabase client configured with the anon key
    """
    url, anon_key = _require_public_config()

    options: dict[str, Any] = {
        "auto_refresh_token": False,
        "persist_session": False,
        "flow_type": "pkce",
    }
    if storage is not None:
        options["storage"] = storage

    return create_client(url, anon_key, options=ClientOptions(**options))


def get_supabase_user_client(access_token: str) -> Client:
    """
    Get Supabase client authenticated as a specific user.

    Use this for all table access: PostgREST evaluates Row Level Security
    policies against the user in the access token.

    Args:
        access_token: JWT access token from Supabase Auth

    Returns:
        Supabase client whose database requests carry the user's token
    """
    url, anon_key = _require_public_config()

    client = create_client(
        url,
        anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    client.postgrest.auth(access_token)
    return client
