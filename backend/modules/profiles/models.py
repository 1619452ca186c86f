"""
Profiles module data models.

A profile extends the Supabase auth user with application fields. One row
per user, created by the on_auth_user_created trigger at sign-up.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator


class SubscriptionTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class Profile(BaseModel):
    """A row of the shared profiles table."""

    id: str = Field(..., description="User ID (same as auth.users.id)")
    email: str = Field(..., description="Email address")
    full_name: Optional[str] = Field(None, description="Display name")
    subscription_tier: SubscriptionTier = Field(default=SubscriptionTier.FREE)
    onboarding_completed: bool = Field(default=False)
    preferences: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @property
    def display_name(self) -> str:
        return self.full_name or self.email.split("@", 1)[0]


class ProfileUpdate(BaseModel):
    """
    Fields a user may change on their own profile.

    subscription_tier is absent: it belongs to billing, not the user.
    """

    full_name: Optional[str] = Field(None, max_length=100)
    onboarding_completed: Optional[bool] = None
    preferences: Optional[dict[str, Any]] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "ProfileUpdate":
        for name in ("onboarding_completed", "preferences"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
