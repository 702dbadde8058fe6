"""Response models shared by the guest features."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.guests.dtos import GuestStatus, RegistrationSource


class GuestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    label_id: UUID | None = None
    status: GuestStatus
    allocated_seats: int
    confirmed_seats: int
    is_on_waitlist: bool
    registration_source: RegistrationSource


class RSVPResponse(BaseModel):
    """Guest after an RSVP or a registration; ``waitlist_position`` is set when queued."""

    guest: GuestResponse
    waitlist_position: int | None = None
    promoted_guest_ids: list[UUID] = []
