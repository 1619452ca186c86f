"""
Expenses module interface.

The API layer depends on IExpenseService for all expense operations.
"""

from typing import Protocol, runtime_checkable

from .models import (
    CreateExpenseRequest,
    Expense,
    ExpenseListResponse,
    ExpenseSummary,
    UpdateExpenseRequest,
)


@runtime_checkable
class IExpenseService(Protocol):
    """
    Interface for expense operations.

    Every method acts on behalf of one user; implementations must never
    return or modify rows owned by anyone else.
    """

    async def list_expenses(self, user_id: str) -> ExpenseListResponse:
        """List the user's expenses, most recent first."""
        ...

    async def get_expense(self, user_id: str, expense_id: str) -> Expense:
        """
        Get one expense.

        Raises:
            ExpenseNotFoundError: If missing or not owned by the user
        """
        ...

    async def create_expense(self, user_id: str, request: CreateExpenseRequest) -> Expense:
        """Record a new expense for the user."""
        ...

    async def update_expense(
        self,
        user_id: str,
        expense_id: str,
        request: UpdateExpenseRequest,
    ) -> Expense:
        """
        Update an expense.

        Raises:
            ExpenseNotFoundError: If missing or not owned by the user
        """
        ...

    async def delete_expense(self, user_id: str, expense_id: str) -> None:
        """
        Delete an expense.

        Raises:
            ExpenseNotFoundError: If missing or not owned by the user
        """
        ...

    async def get_summary(self, user_id: str) -> ExpenseSummary:
        """Count and totals for the dashboard."""
        ...
