from uuid import UUID

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.budget.dtos import AddonType, PricingType, RequestStatus, RequestType
from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


def _values(enum_cls):
    return [e.value for e in enum_cls]


class Perk(Base, TimeStamp):
    """An add-on offered at the event: airport pickup, spa, room upgrade..."""

    __tablename__ = TableNames.PERKS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    perk_type: Mapped[str] = mapped_column(String(50), nullable=False, default="activity")
    unit_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pricing_type: Mapped[PricingType] = mapped_column(
        Enum(PricingType, name="pricing_type_enum", values_callable=_values),
        default=PricingType.REQUESTABLE,
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")

    def __repr__(self) -> str:
        return f"<Perk {self.name} ({self.pricing_type.value})>"


class TierPerk(Base, TimeStamp):
    __tablename__ = TableNames.TIER_PERKS.value
    __table_args__ = (UniqueConstraint("tier_id", "perk_id", name="uq_tier_perk"),)

    tier_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.TIERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    perk_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.PERKS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expense_handled_by_client: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # NULL uses the perk's unit cost
    budget_consumed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    agent_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class GuestRequest(Base, TimeStamp):
    __tablename__ = TableNames.GUEST_REQUESTS.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    perk_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.PERKS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
    )
    request_type: Mapped[RequestType] = mapped_column(
        Enum(RequestType, name="request_type_enum", values_callable=_values),
        nullable=False,
    )
    addon_type: Mapped[AddonType | None] = mapped_column(
        Enum(AddonType, name="addon_type_enum", values_callable=_values),
        nullable=True,
    )
    status: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus, name="request_status_enum", values_callable=_values),
        default=RequestStatus.PENDING,
        nullable=False,
        index=True,
    )
    budget_consumed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    was_forwarded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<GuestRequest {self.uuid} {self.status.value}>"
