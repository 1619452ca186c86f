"""
Settings endpoints.

Read and edit the signed-in user's own profile.
"""

from fastapi import APIRouter, Depends

from modules.auth.state import SessionState
from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.models import Profile, ProfileUpdate
from modules.profiles.repository import ProfileRepository
from ..dependencies import get_profile_repository, require_session
from ..models.errors import ErrorResponse

router = APIRouter()


@router.get("", response_model=Profile, responses={404: {"model": ErrorResponse}})
async def get_profile(
    state: SessionState = Depends(require_session),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """Get the current user's profile."""
    if state.profile is not None:
        return state.profile
    profile = profiles.get(state.user.id)
    if profile is None:
        raise ProfileNotFoundError(state.user.id)
    return profile


@router.patch("", response_model=Profile, responses={404: {"model": ErrorResponse}})
async def update_profile(
    changes: ProfileUpdate,
    state: SessionState = Depends(require_session),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """Update display name, onboarding flag or preferences."""
    profile = profiles.update(state.user.id, changes)
    state.profile = profile
    return profile
