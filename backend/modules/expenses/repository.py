"""
Expense repository for database access.

Encapsulates all Supabase queries and data mapping for the expenses table.
"""

from decimal import Decimal
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import (
    CreateExpenseRequest,
    Expense,
    ExpenseCategory,
    UpdateExpenseRequest,
)


class ExpenseRepository(BaseRepository[Expense]):
    """
    Repository for expense data access.

    Must be constructed with a user-scoped client. Every query also
    filters on user_id, so a wrong client yields no rows rather than
    another user's data.
    """

    table = "expenses"

    def list_for_user(self, user_id: str) -> list[Expense]:
        """All expenses for a user, most recent date first."""
        rows = self._execute(
            self._scoped(user_id)
            .order("date", desc=True)
            .order("created_at", desc=True)
        )
        return [self._map_to_expense(row) for row in rows]

    def get(self, user_id: str, expense_id: str) -> Optional[Expense]:
        rows = self._execute(self._scoped(user_id).eq("id", expense_id))
        if not rows:
            return None
        return self._map_to_expense(rows[0])

    def create(self, user_id: str, request: CreateExpenseRequest) -> Expense:
        data = {
            "user_id": user_id,
            "amount": float(request.amount),
            "category": request.category.value,
            "note": request.note,
            "date": request.date.isoformat(),
        }
        rows = self._execute(self._query().insert(data))
        return self._map_to_expense(rows[0])

    def update(
        self,
        user_id: str,
        expense_id: str,
        request: UpdateExpenseRequest,
    ) -> Optional[Expense]:
        """
        Update the fields set on `request`.

        Returns:
            The updated expense, or None if no visible row matched.
        """
        changes = request.model_dump(exclude_unset=True)
        data: dict[str, Any] = {}
        if "amount" in changes:
            data["amount"] = float(changes["amount"])
        if "category" in changes:
            data["category"] = ExpenseCategory(changes["category"]).value
        if "note" in changes:
            data["note"] = changes["note"]
        if "date" in changes:
            data["date"] = changes["date"].isoformat()

        if not data:
            return self.get(user_id, expense_id)

        rows = self._execute(
            self._query().update(data).eq("id", expense_id).eq("user_id", user_id)
        )
        if not rows:
            return None
        return self._map_to_expense(rows[0])

    def delete(self, user_id: str, expense_id: str) -> bool:
        """
        Delete an expense.

        Returns:
            True if a row was deleted, False if none was visible.
        """
        rows = self._execute(
            self._query().delete().eq("id", expense_id).eq("user_id", user_id)
        )
        return len(rows) > 0

    def amounts(self, user_id: str) -> list[tuple[ExpenseCategory, Decimal]]:
        """(category, amount) pairs for every expense, for summaries."""
        rows = self._execute(self._scoped(user_id, columns="amount, category"))
        return [
            (ExpenseCategory(row["category"]), Decimal(str(row["amount"])))
            for row in rows
        ]

    @staticmethod
    def _map_to_expense(row: dict[str, Any]) -> Expense:
        return Expense(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            amount=Decimal(str(row["amount"])),
            category=ExpenseCategory(row["category"]),
            note=row.get("note"),
            date=row["date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
