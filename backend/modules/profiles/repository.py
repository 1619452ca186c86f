"""
Profile repository for database access.

Reads and updates the signed-in user's own row of the profiles table.
Rows are never inserted from here; the sign-up trigger owns creation and
deletion cascades from auth.users.
"""

from typing import Any, Optional

from shared.repository import BaseRepository
from .models import Profile, ProfileUpdate
from .exceptions import ProfileNotFoundError


class ProfileRepository(BaseRepository[Profile]):
    """Repository for the profiles table."""

    table = "profiles"
    owner_column = "id"

    def get(self, user_id: str) -> Optional[Profile]:
        rows = self._execute(self._scoped(user_id))
        if not rows:
            return None
        return self._map_to_profile(rows[0])

    def update(self, user_id: str, changes: ProfileUpdate) -> Profile:
        """
        Apply the fields set on `changes`.

        Raises:
            ProfileNotFoundError: If no row was visible to update
        """
        data = changes.model_dump(exclude_unset=True)
        if not data:
            profile = self.get(user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)
            return profile

        rows = self._execute(self._query().update(data).eq("id", user_id))
        if not rows:
            raise ProfileNotFoundError(user_id)
        return self._map_to_profile(rows[0])

    @staticmethod
    def _map_to_profile(row: dict[str, Any]) -> Profile:
        return Profile(
            id=str(row["id"]),
            email=row.get("email") or "",
            full_name=row.get("full_name"),
            subscription_tier=row.get("subscription_tier") or "free",
            onboarding_completed=bool(row.get("onboarding_completed", False)),
            preferences=row.get("preferences") or {},
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
