from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field

from src.guests.dtos import RegistrationSource
from src.guests.features.schemas import GuestResponse, RSVPResponse
from src.guests.repository.write_models import GuestWriteModel, SqlGuestWriteModel
from src.guests.urls import REGISTER_GUEST_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class GuestRegistration(BaseModel):
    name: str = Field(min_length=1)
    source: RegistrationSource = RegistrationSource.INVITED
    email: EmailStr | None = None
    phone: str | None = None
    allocated_seats: int = Field(default=1, ge=1)
    label_id: UUID | None = None


def get_guest_write_model() -> GuestWriteModel:
    return SqlGuestWriteModel()


@router.post(REGISTER_GUEST_URL, response_model=RSVPResponse, status_code=status.HTTP_201_CREATED)
async def register_guest(
    event_id: UUID,
    registration: GuestRegistration,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> RSVPResponse:
    """
    Add a guest to an event.

    Invited and self-registered guests start pending. Walk-ins (``on_spot``)
    are confirmed for one seat straight away, or waitlisted when the hotel
    block is full.
    """
    try:
        result = await write_model.register_guest(
            event_id,
            registration.name,
            source=registration.source,
            email=registration.email,
            phone=registration.phone,
            allocated_seats=registration.allocated_seats,
            label_id=registration.label_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return RSVPResponse(
        guest=GuestResponse.model_validate(result.value.guest),
        waitlist_position=result.value.waitlist_position,
    )
