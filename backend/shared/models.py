"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Built from the session the request gate validated and made available
    to route handlers via dependency injection.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(default="", description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }
