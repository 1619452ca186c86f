"""
Expenses module exceptions.
"""

from shared.exceptions import NotFoundError


class ExpenseNotFoundError(NotFoundError):
    """
    Raised when an expense does not exist or is not visible to the user.

    Row-level security makes the two cases indistinguishable.
    """

    def __init__(self, expense_id: str):
        super().__init__(
            f"Expense not found: {expense_id}",
            code="EXPENSE_NOT_FOUND",
            details={"expense_id": expense_id},
        )
