from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from src.itinerary.features.schemas import RegistrationResponse, SessionResponse
from src.itinerary.repository.write_models import ItineraryWriteModel, SqlItineraryWriteModel
from src.itinerary.urls import SESSION_REGISTRATION_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


def get_itinerary_write_model() -> ItineraryWriteModel:
    """Dependency to get itinerary write model instance."""
    return SqlItineraryWriteModel()


@router.post(SESSION_REGISTRATION_URL, response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_session(
    guest_id: UUID,
    session_id: UUID,
    write_model: ItineraryWriteModel = Depends(get_itinerary_write_model),
) -> RegistrationResponse:
    """
    Register a guest for a session.

    Fails with 409 when the guest is already registered, when the session
    overlaps one they attend (the overlapping sessions are listed) or when it
    is full.
    """
    try:
        result = await write_model.register(guest_id, session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return RegistrationResponse(
        session=SessionResponse.from_dto(result.value.session), implicit=result.value.implicit
    )
