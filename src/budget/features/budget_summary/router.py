from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.budget.repository.read_models import BudgetReadModel, SqlBudgetReadModel
from src.budget.urls import BUDGET_SUMMARY_URL

router = APIRouter()


class TierBudgetResponse(BaseModel):
    tier_id: UUID
    tier_name: str
    guest_count: int
    budget_per_guest: int
    allocated: int
    used: int
    remaining: int


def get_budget_read_model() -> BudgetReadModel:
    """Dependency to get budget read model instance."""
    return SqlBudgetReadModel()


@router.get(BUDGET_SUMMARY_URL, response_model=list[TierBudgetResponse])
async def get_budget_summary(
    event_id: UUID,
    read_model: BudgetReadModel = Depends(get_budget_read_model),
) -> list[TierBudgetResponse]:
    summaries = await read_model.get_budget_summary(event_id)
    return [
        TierBudgetResponse(
            tier_id=s.tier_id,
            tier_name=s.tier_name,
            guest_count=s.guest_count,
            budget_per_guest=s.budget_per_guest,
            allocated=s.allocated,
            used=s.used,
            remaining=s.remaining,
        )
        for s in summaries
    ]
