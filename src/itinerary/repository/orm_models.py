from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import AwareDateTime, Base, TimeStamp


class ItinerarySession(Base, TimeStamp):
    __tablename__ = TableNames.ITINERARY_SESSIONS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(AwareDateTime(), nullable=False)
    end_time: Mapped[datetime] = mapped_column(AwareDateTime(), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_mandatory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_attendees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ItinerarySession {self.title} {self.start_time}>"


class ItineraryRegistration(Base, TimeStamp):
    __tablename__ = TableNames.ITINERARY_REGISTRATIONS.value
    __table_args__ = (
        UniqueConstraint("guest_id", "session_id", name="uq_registration_guest_session"),
    )

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.ITINERARY_SESSIONS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    registered_at: Mapped[datetime] = mapped_column(AwareDateTime(), nullable=False)
