"""
Expense service implementation with Supabase.

Thin business layer over ExpenseRepository: turns "no visible row" into
ExpenseNotFoundError and computes dashboard totals.
"""

import logging
from decimal import Decimal

from .interfaces import IExpenseService
from .repository import ExpenseRepository
from .models import (
    CreateExpenseRequest,
    Expense,
    ExpenseListResponse,
    ExpenseSummary,
    UpdateExpenseRequest,
)
from .exceptions import ExpenseNotFoundError

logger = logging.getLogger(__name__)


class ExpenseService(IExpenseService):
    """Expense service backed by a user-scoped repository."""

    def __init__(self, repository: ExpenseRepository):
        self._repo = repository

    async def list_expenses(self, user_id: str) -> ExpenseListResponse:
        expenses = self._repo.list_for_user(user_id)
        return ExpenseListResponse(expenses=expenses, total=len(expenses))

    async def get_expense(self, user_id: str, expense_id: str) -> Expense:
        expense = self._repo.get(user_id, expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    async def create_expense(self, user_id: str, request: CreateExpenseRequest) -> Expense:
        expense = self._repo.create(user_id, request)
        logger.debug("Created expense %s", expense.id)
        return expense

    async def update_expense(
        self,
        user_id: str,
        expense_id: str,
        request: UpdateExpenseRequest,
    ) -> Expense:
        expense = self._repo.update(user_id, expense_id, request)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    async def delete_expense(self, user_id: str, expense_id: str) -> None:
        if not self._repo.delete(user_id, expense_id):
            raise ExpenseNotFoundError(expense_id)

    async def get_summary(self, user_id: str) -> ExpenseSummary:
        by_category: dict = {}
        total = Decimal("0")
        count = 0
        for category, amount in self._repo.amounts(user_id):
            by_category[category] = by_category.get(category, Decimal("0")) + amount
            total += amount
            count += 1
        return ExpenseSummary(count=count, total_spent=total, by_category=by_category)
