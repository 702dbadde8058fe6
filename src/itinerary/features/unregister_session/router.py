from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.itinerary.features.schemas import SessionResponse
from src.itinerary.repository.write_models import ItineraryWriteModel, SqlItineraryWriteModel
from src.itinerary.urls import SESSION_REGISTRATION_URL

router = APIRouter()


class UnregistrationResponse(BaseModel):
    session: SessionResponse
    removed: bool


def get_itinerary_write_model() -> ItineraryWriteModel:
    return SqlItineraryWriteModel()


@router.delete(SESSION_REGISTRATION_URL, response_model=UnregistrationResponse)
async def unregister_session(
    guest_id: UUID,
    session_id: UUID,
    write_model: ItineraryWriteModel = Depends(get_itinerary_write_model),
) -> UnregistrationResponse:
    try:
        result = await write_model.unregister(guest_id, session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return UnregistrationResponse(
        session=SessionResponse.from_dto(result.value.session), removed=result.value.removed
    )
