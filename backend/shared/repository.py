"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import Any, TypeVar, Generic

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import AuthorizationError, ExternalServiceError


T = TypeVar("T")

# PostgreSQL insufficient_privilege, raised when a row-level policy rejects a write
RLS_VIOLATION = "42501"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Repositories are built on a user-scoped client (see
    shared.database.get_supabase_user_client), so row-level policies
    restrict every query to the signed-in user. Queries additionally
    filter on the owning column; the policy stays the authority.

    Example:
        class ExpenseRepository(BaseRepository[Expense]):
            table = "expenses"

            def get(self, user_id: str, expense_id: str) -> Optional[Expense]:
                rows = self._execute(self._scoped(user_id).eq("id", expense_id))
                return self._map(rows[0]) if rows else None
    """

    table: str = ""
    owner_column: str = "user_id"

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: User-scoped Supabase client instance.
        """
        self._db = db

    def _query(self):
        return self._db.table(self.table)

    def _scoped(self, user_id: str, columns: str = "*"):
        """Select builder restricted to rows owned by user_id."""
        return self._query().select(columns).eq(self.owner_column, user_id)

    def _execute(self, builder: Any) -> list[dict[str, Any]]:
        """
        Execute a query builder and return its rows.

        Raises:
            AuthorizationError: If a row-level policy rejected the write
            ExternalServiceError: For any other database or network failure
        """
        try:
            result = builder.execute()
        except APIError as e:
            if e.code == RLS_VIOLATION:
                raise AuthorizationError(
                    "Row-level policy rejected the operation",
                    code="ROW_POLICY_VIOLATION",
                    details={"table": self.table},
                ) from e
            raise ExternalServiceError(
                e.message or "Database request failed",
                service="supabase_db",
                details={"table": self.table},
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "Database unavailable",
                service="supabase_db",
                details={"table": self.table},
            ) from e
        return list(result.data or []) if result is not None else []
