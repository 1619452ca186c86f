"""
Shared infrastructure for the Outlay backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory (anon key only)
- exceptions: Base exception classes
- repository: Base class for user-scoped repositories

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import create_auth_client, get_supabase_user_client
from .exceptions import (
    OutlayError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "create_auth_client",
    "get_supabase_user_client",
    "OutlayError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "AuthenticatedUser",
]
