from uuid import UUID

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import GuestStatus, RegistrationSource
from src.models.base import Base, TimeStamp


class Tier(Base, TimeStamp):
    """Guest category of an event (the "label" shown to agents)."""

    __tablename__ = TableNames.TIERS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # minor currency units per guest
    add_on_budget: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    waitlist_priority: Mapped[int | None] = mapped_column(Integer, nullable=True)
    requires_room: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Tier {self.name}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.TIERS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[GuestStatus] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=GuestStatus.PENDING,
        nullable=False,
    )
    allocated_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    confirmed_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_on_waitlist: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    waitlist_priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    registration_source: Mapped[RegistrationSource] = mapped_column(
        Enum(
            RegistrationSource,
            name="registration_source_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=RegistrationSource.INVITED,
        nullable=False,
    )
    # WALK-xxxx for on-the-spot registrations
    booking_ref: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def __repr__(self) -> str:
        return f"<Guest {self.name} - {self.status.value}>"
