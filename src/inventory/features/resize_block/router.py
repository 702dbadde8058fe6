from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.inventory.features.schemas import AllocationResponse
from src.inventory.repository.write_models import InventoryWriteModel, SqlInventoryWriteModel
from src.inventory.urls import RESIZE_BLOCK_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class BlockUpdate(BaseModel):
    blocked: int = Field(ge=0)


def get_inventory_write_model() -> InventoryWriteModel:
    return SqlInventoryWriteModel()


@router.put(RESIZE_BLOCK_URL, response_model=AllocationResponse)
async def resize_block(
    pool_id: UUID,
    update: BlockUpdate,
    write_model: InventoryWriteModel = Depends(get_inventory_write_model),
) -> AllocationResponse:
    """
    Set the number of units the supplier holds for the event.

    A block can never shrink below what is already confirmed. Growing it
    serves the waitlist.
    """
    try:
        result = await write_model.resize_block(pool_id, update.blocked)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return AllocationResponse.from_result(result.value)
