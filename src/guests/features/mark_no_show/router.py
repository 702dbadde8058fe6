from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.guests.features.schemas import GuestResponse
from src.guests.repository.write_models import GuestWriteModel, SqlGuestWriteModel
from src.guests.urls import NO_SHOW_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class NoShowResponse(BaseModel):
    guest: GuestResponse
    promoted_guest_ids: list[UUID] = []


def get_guest_write_model() -> GuestWriteModel:
    return SqlGuestWriteModel()


@router.post(NO_SHOW_URL, response_model=NoShowResponse)
async def mark_no_show(
    guest_id: UUID,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> NoShowResponse:
    """
    Mark a guest as not coming. Their rooms go back to the block and the
    waitlist is served right away.
    """
    try:
        result = await write_model.mark_no_show(guest_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return NoShowResponse(
        guest=GuestResponse.model_validate(result.value.guest),
        promoted_guest_ids=[g.uuid for g in result.value.promoted],
    )
