from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.guests.dtos import RSVPDecision
from src.guests.features.schemas import GuestResponse, RSVPResponse
from src.guests.repository.write_models import GuestWriteModel, SqlGuestWriteModel
from src.guests.urls import SUBMIT_RSVP_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class RSVPSubmit(BaseModel):
    decision: RSVPDecision
    # defaults to every allocated seat
    seats: int | None = Field(default=None, ge=1)


def get_guest_write_model() -> GuestWriteModel:
    """Dependency to get guest write model instance."""
    return SqlGuestWriteModel()


@router.post(SUBMIT_RSVP_URL, response_model=RSVPResponse)
async def submit_rsvp(
    guest_id: UUID,
    rsvp: RSVPSubmit,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> RSVPResponse:
    """
    Confirm or decline an invitation.

    Confirming takes rooms from the event's primary hotel block. When the block
    is full the guest is put on the waitlist and the response carries their
    position.
    """
    try:
        result = await write_model.submit_rsvp(guest_id, rsvp.decision, rsvp.seats)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    outcome = result.value
    return RSVPResponse(
        guest=GuestResponse.model_validate(outcome.guest),
        waitlist_position=outcome.waitlist_position,
        promoted_guest_ids=[g.uuid for g in outcome.promoted],
    )
