"""
Expenses module data models.

These models define the expense tracker's records and the request bodies
its endpoints accept. Request models reject malformed input before any
database call is made.
"""

from datetime import date as date_type, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class ExpenseCategory(str, Enum):
    """Allowed expense categories (mirrors the table's CHECK constraint)."""

    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    OTHER = "Other"


NOTE_MAX_LENGTH = 500


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Expense(BaseModel):
    """A single expense owned by one user."""

    id: str
    user_id: str
    amount: Decimal
    category: ExpenseCategory
    note: Optional[str] = None
    date: date_type
    created_at: datetime
    updated_at: datetime


class CreateExpenseRequest(BaseModel):
    """Request to record a new expense."""

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Positive amount with at most two decimal places",
    )
    category: ExpenseCategory = Field(default=ExpenseCategory.FOOD)
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)
    date: date_type = Field(default_factory=date_type.today)

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class UpdateExpenseRequest(BaseModel):
    """Partial update; only the fields sent are changed."""

    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[ExpenseCategory] = None
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)
    date: Optional[date_type] = None

    model_config = {"extra": "forbid"}

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "UpdateExpenseRequest":
        """Only note may be cleared; the other columns are NOT NULL."""
        for name in ("amount", "category", "date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ExpenseListResponse(BaseModel):
    """All of the user's expenses, newest first."""

    expenses: list[Expense]
    total: int


class ExpenseSummary(BaseModel):
    """Dashboard figures for the signed-in user."""

    count: int = 0
    total_spent: Decimal = Decimal("0")
    by_category: dict[ExpenseCategory, Decimal] = Field(default_factory=dict)
