from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.itinerary.dtos import SessionDTO


class SessionResponse(BaseModel):
    uuid: UUID
    title: str
    start_time: datetime
    end_time: datetime
    location: str | None = None
    is_mandatory: bool
    capacity: int | None = None
    current_attendees: int

    @classmethod
    def from_dto(cls, session: SessionDTO) -> "SessionResponse":
        return cls(
            uuid=session.uuid,
            title=session.title,
            start_time=session.start_time,
            end_time=session.end_time,
            location=session.location,
            is_mandatory=session.is_mandatory,
            capacity=session.capacity,
            current_attendees=session.current_attendees,
        )


class RegistrationResponse(BaseModel):
    session: SessionResponse
    # mandatory sessions are attended without a registration
    implicit: bool
