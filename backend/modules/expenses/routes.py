"""
Expense API endpoints.

The /expenses path is registered as protected, so the session gate has
already turned unauthenticated requests into a redirect before any of
these handlers run.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_expense_service
from api.models.errors import ErrorResponse
from shared.models import AuthenticatedUser

from .interfaces import IExpenseService
from .models import (
    CreateExpenseRequest,
    Expense,
    ExpenseListResponse,
    UpdateExpenseRequest,
)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IExpenseService = Depends(get_expense_service),
) -> ExpenseListResponse:
    """List the current user's expenses, most recent first."""
    return await service.list_expenses(user.id)


@router.post("", response_model=Expense, status_code=201)
async def create_expense(
    request: CreateExpenseRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IExpenseService = Depends(get_expense_service),
) -> Expense:
    """Record a new expense."""
    return await service.create_expense(user.id, request)


@router.get("/{expense_id}", response_model=Expense, responses=NOT_FOUND)
async def get_expense(
    expense_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IExpenseService = Depends(get_expense_service),
) -> Expense:
    return await service.get_expense(user.id, expense_id)


@router.patch("/{expense_id}", response_model=Expense, responses=NOT_FOUND)
async def update_expense(
    expense_id: str,
    request: UpdateExpenseRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IExpenseService = Depends(get_expense_service),
) -> Expense:
    """Change some fields of an expense."""
    return await service.update_expense(user.id, expense_id, request)


@router.delete("/{expense_id}", status_code=204, responses=NOT_FOUND)
async def delete_expense(
    expense_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IExpenseService = Depends(get_expense_service),
) -> None:
    await service.delete_expense(user.id, expense_id)
