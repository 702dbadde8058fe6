from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from src.inventory.features.schemas import AllocationResponse
from src.inventory.repository.write_models import InventoryWriteModel, SqlInventoryWriteModel
from src.inventory.urls import LEAVE_WAITLIST_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


def get_inventory_write_model() -> InventoryWriteModel:
    return SqlInventoryWriteModel()


@router.delete(LEAVE_WAITLIST_URL, response_model=AllocationResponse)
async def leave_waitlist(
    pool_id: UUID,
    guest_id: UUID,
    write_model: InventoryWriteModel = Depends(get_inventory_write_model),
) -> AllocationResponse:
    try:
        result = await write_model.leave_waitlist(pool_id, guest_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return AllocationResponse.from_result(result.value)
