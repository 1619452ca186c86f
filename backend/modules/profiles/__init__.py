"""
Profiles module.

The shared user-profile table every app built on this project reads.

Public API:
- Profile, ProfileUpdate, SubscriptionTier: Data models
- ProfileRepository: User-scoped access to the profiles table
- ProfileNotFoundError
"""

from .models import Profile, ProfileUpdate, SubscriptionTier
from .repository import ProfileRepository
from .exceptions import ProfileNotFoundError

__all__ = [
    "Profile",
    "ProfileUpdate",
    "SubscriptionTier",
    "ProfileRepository",
    "ProfileNotFoundError",
]
