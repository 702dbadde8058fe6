from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.itinerary.features.schemas import SessionResponse
from src.itinerary.repository.read_models import ItineraryReadModel, SqlItineraryReadModel
from src.itinerary.urls import ITINERARY_URL

router = APIRouter()


class ItineraryItemResponse(BaseModel):
    session: SessionResponse
    registered: bool
    has_conflict: bool
    is_full: bool


def get_itinerary_read_model() -> ItineraryReadModel:
    """Dependency to get itinerary read model instance."""
    return SqlItineraryReadModel()


@router.get(ITINERARY_URL, response_model=list[ItineraryItemResponse])
async def get_itinerary(
    guest_id: UUID,
    read_model: ItineraryReadModel = Depends(get_itinerary_read_model),
) -> list[ItineraryItemResponse]:
    """The programme of the guest's event, flagged with what the guest can still join."""
    items = await read_model.get_itinerary(guest_id)
    if items is None:
        raise HTTPException(status_code=404, detail=f"Guest with UUID {guest_id} not found")
    return [
        ItineraryItemResponse(
            session=SessionResponse.from_dto(item.session),
            registered=item.registered,
            has_conflict=item.has_conflict,
            is_full=item.is_full,
        )
        for item in items
    ]
