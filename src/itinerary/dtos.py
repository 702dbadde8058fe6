from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.itinerary.repository.orm_models import ItineraryRegistration, ItinerarySession


@dataclass(frozen=True)
class SessionDTO:
    """A timed item of the event programme (gala dinner, city tour, ...)."""

    uuid: UUID
    event_id: UUID
    title: str
    start_time: datetime
    end_time: datetime
    location: str | None = None
    is_mandatory: bool = False
    # None means unlimited
    capacity: int | None = None
    current_attendees: int = 0

    def __post_init__(self) -> None:
        if self.start_time >= self.end_time:
            raise ValueError(f"Session {self.title!r} must start before it ends")
        if self.current_attendees < 0:
            raise ValueError(f"Session {self.title!r} cannot have negative attendees")
        if self.capacity is not None and self.current_attendees > self.capacity:
            raise ValueError(
                f"Session {self.title!r} has {self.current_attendees} attendees for {self.capacity} places"
            )

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and self.current_attendees >= self.capacity

    @classmethod
    def from_model(cls, session: "ItinerarySession") -> "SessionDTO":
        return cls(
            uuid=session.uuid,
            event_id=session.event_id,
            title=session.title,
            start_time=session.start_time,
            end_time=session.end_time,
            location=session.location,
            is_mandatory=session.is_mandatory,
            capacity=session.capacity,
            current_attendees=session.current_attendees,
        )


@dataclass(frozen=True)
class RegistrationDTO:
    guest_id: UUID
    session_id: UUID
    registered_at: datetime

    @classmethod
    def from_model(cls, registration: "ItineraryRegistration") -> "RegistrationDTO":
        return cls(
            guest_id=registration.guest_id,
            session_id=registration.session_id,
            registered_at=registration.registered_at,
        )


@dataclass(frozen=True)
class RegistrationOutcome:
    session: SessionDTO
    # None for mandatory sessions: attendance is implicit, no row is written
    registration: RegistrationDTO | None = None

    @property
    def implicit(self) -> bool:
        return self.registration is None


@dataclass(frozen=True)
class UnregistrationOutcome:
    session: SessionDTO
    removed: bool


@dataclass(frozen=True)
class SwitchOutcome:
    released: tuple[UnregistrationOutcome, ...]
    registered: RegistrationOutcome | None = None


@dataclass(frozen=True)
class ItineraryItem:
    session: SessionDTO
    registered: bool
    has_conflict: bool
    is_full: bool
