from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.inventory.features.schemas import AllocationResponse
from src.inventory.repository.write_models import InventoryWriteModel, SqlInventoryWriteModel
from src.inventory.urls import RELEASE_UNITS_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class ReleaseUnits(BaseModel):
    units: int = Field(ge=1)


def get_inventory_write_model() -> InventoryWriteModel:
    """Dependency to get inventory write model instance."""
    return SqlInventoryWriteModel()


@router.post(RELEASE_UNITS_URL, response_model=AllocationResponse)
async def release_units(
    pool_id: UUID,
    release: ReleaseUnits,
    write_model: InventoryWriteModel = Depends(get_inventory_write_model),
) -> AllocationResponse:
    """Give confirmed units back to the pool; waiting guests that now fit are promoted."""
    try:
        result = await write_model.release(pool_id, release.units)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return AllocationResponse.from_result(result.value)
