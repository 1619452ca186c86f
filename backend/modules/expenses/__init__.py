"""
Expenses module.

The demonstrative CRUD feature: each user records, edits and deletes
their own expenses. Isolation between users is enforced by row-level
security on the expenses table.

Public API:
- IExpenseService: Interface for expense operations
- Expense, ExpenseCategory, request/response models
- ExpenseNotFoundError
"""

from .interfaces import IExpenseService
from .models import (
    CreateExpenseRequest,
    Expense,
    ExpenseCategory,
    ExpenseListResponse,
    ExpenseSummary,
    UpdateExpenseRequest,
)
from .exceptions import ExpenseNotFoundError

__all__ = [
    # Interface
    "IExpenseService",
    # Models
    "CreateExpenseRequest",
    "Expense",
    "ExpenseCategory",
    "ExpenseListResponse",
    "ExpenseSummary",
    "UpdateExpenseRequest",
    # Exceptions
    "ExpenseNotFoundError",
]
