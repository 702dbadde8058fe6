from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from src.inventory.dtos import UtilizationSeverity
from src.inventory.repository.read_models import InventoryReadModel, SqlInventoryReadModel
from src.inventory.urls import INVENTORY_STATUS_URL

router = APIRouter()


class PoolStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pool_id: UUID
    name: str
    blocked: int
    confirmed: int
    available: int
    utilization_pct: int
    severity: UtilizationSeverity
    message: str
    waitlisted: int


def get_inventory_read_model() -> InventoryReadModel:
    """Dependency to get inventory read model instance."""
    return SqlInventoryReadModel()


@router.get(INVENTORY_STATUS_URL, response_model=list[PoolStatusResponse])
async def get_inventory_status(
    event_id: UUID,
    read_model: InventoryReadModel = Depends(get_inventory_read_model),
) -> list[PoolStatusResponse]:
    """Early-warning view of every hotel and flight block of the event."""
    pools = await read_model.get_inventory_status(event_id)
    return [PoolStatusResponse.model_validate(p) for p in pools]
