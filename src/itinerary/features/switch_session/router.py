from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.itinerary.features.schemas import RegistrationResponse, SessionResponse
from src.itinerary.repository.write_models import ItineraryWriteModel, SqlItineraryWriteModel
from src.itinerary.urls import SWITCH_SESSION_URL
from src.routers.errors import error_detail, http_error

router = APIRouter()


class SessionSwitch(BaseModel):
    from_session_ids: list[UUID] = Field(min_length=1)
    to_session_id: UUID


def get_itinerary_write_model() -> ItineraryWriteModel:
    return SqlItineraryWriteModel()


@router.post(SWITCH_SESSION_URL, response_model=RegistrationResponse)
async def switch_session(
    guest_id: UUID,
    switch: SessionSwitch,
    write_model: ItineraryWriteModel = Depends(get_itinerary_write_model),
) -> RegistrationResponse:
    """
    Leave some sessions and join another one.

    Not atomic: when joining fails, the sessions left stay left. The error
    lists them under ``released_session_ids``.
    """
    try:
        result = await write_model.switch_session(
            guest_id, switch.from_session_ids, switch.to_session_id
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not result.ok:
        error = http_error(result.error)
        error.detail = {
            **error_detail(result.error),
            "released_session_ids": [
                str(r.session.uuid) for r in result.value.released if r.removed
            ],
        }
        raise error

    registered = result.value.registered
    return RegistrationResponse(
        session=SessionResponse.from_dto(registered.session), implicit=registered.implicit
    )
