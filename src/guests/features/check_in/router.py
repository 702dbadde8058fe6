from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from src.guests.features.schemas import GuestResponse
from src.guests.repository.write_models import GuestWriteModel, SqlGuestWriteModel
from src.guests.urls import CHECK_IN_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


def get_guest_write_model() -> GuestWriteModel:
    return SqlGuestWriteModel()


@router.post(CHECK_IN_URL, response_model=GuestResponse)
async def check_in(
    guest_id: UUID,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    """Mark a confirmed guest as arrived at the venue."""
    try:
        result = await write_model.check_in(guest_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return GuestResponse.model_validate(result.value)
