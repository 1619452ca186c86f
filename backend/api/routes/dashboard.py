"""
Home page endpoint.

The dashboard greets the user by profile name and shows their expense
count and total spent.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from modules.auth.state import SessionState
from modules.expenses.interfaces import IExpenseService
from modules.expenses.models import ExpenseSummary
from modules.profiles.models import SubscriptionTier
from ..dependencies import get_expense_service, require_session

router = APIRouter()


class DashboardResponse(BaseModel):
    display_name: str
    email: str
    subscription_tier: Optional[SubscriptionTier] = None
    onboarding_completed: bool = False
    summary: ExpenseSummary


@router.get("/", response_model=DashboardResponse)
async def dashboard(
    state: SessionState = Depends(require_session),
    service: IExpenseService = Depends(get_expense_service),
) -> DashboardResponse:
    user = state.user
    profile = state.profile
    summary = await service.get_summary(user.id)

    if profile is None:
        # Profile fetch failed; fall back to what the session knows
        return DashboardResponse(
            display_name=user.email.split("@", 1)[0],
            email=user.email,
            summary=summary,
        )

    return DashboardResponse(
        display_name=profile.display_name,
        email=profile.email,
        subscription_tier=profile.subscription_tier,
        onboarding_completed=profile.onboarding_completed,
        summary=summary,
    )
