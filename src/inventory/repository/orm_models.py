from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.inventory.dtos import InventoryType
from src.models.base import AwareDateTime, Base, TimeStamp


class ResourcePool(Base, TimeStamp):
    """Rooms or seats blocked with a supplier for one event."""

    __tablename__ = TableNames.RESOURCE_POOLS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    inventory_type: Mapped[InventoryType] = mapped_column(
        Enum(InventoryType, name="inventory_type_enum", values_callable=lambda x: [e.value for e in x]),
        default=InventoryType.HOTEL,
        nullable=False,
    )
    # the pool an RSVP confirmation draws from
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blocked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    confirmed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    valid_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    valid_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    negotiated_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    def __repr__(self) -> str:
        return f"<ResourcePool {self.name} {self.confirmed}/{self.blocked}>"


class WaitlistEntry(Base, TimeStamp):
    __tablename__ = TableNames.WAITLIST_ENTRIES.value
    __table_args__ = (UniqueConstraint("pool_id", "guest_id", name="uq_waitlist_pool_guest"),)

    pool_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.RESOURCE_POOLS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(AwareDateTime(), nullable=False)
    requested_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<WaitlistEntry guest={self.guest_id} priority={self.priority}>"
