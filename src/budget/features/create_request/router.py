from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.budget.dtos import AddonType
from src.budget.features.schemas import GuestRequestResponse
from src.budget.repository.write_models import RequestWriteModel, SqlRequestWriteModel
from src.budget.urls import CREATE_REQUEST_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class GuestRequestCreate(BaseModel):
    perk_id: UUID | None = None
    # minor currency units; defaults to the tier or perk price
    cost: int | None = Field(default=None, ge=0)
    addon_type: AddonType | None = None
    notes: str | None = None


def get_request_write_model() -> RequestWriteModel:
    """Dependency to get request write model instance."""
    return SqlRequestWriteModel()


@router.post(CREATE_REQUEST_URL, response_model=GuestRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    guest_id: UUID,
    request: GuestRequestCreate,
    write_model: RequestWriteModel = Depends(get_request_write_model),
) -> GuestRequestResponse:
    """
    Ask for a perk or a custom add-on.

    The request is approved right away when it fits the remaining allowance
    of the guest's tier, and otherwise waits for an agent.
    """
    try:
        result = await write_model.create_request(
            guest_id,
            perk_id=request.perk_id,
            cost=request.cost,
            addon_type=request.addon_type,
            notes=request.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return GuestRequestResponse.model_validate(result.value)
