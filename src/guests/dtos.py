from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.guests.repository.orm_models import Guest, Tier
    from src.inventory.dtos import ResourcePoolDTO
    from src.inventory.waitlist import WaitlistQueue


class GuestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    ARRIVED = "arrived"
    NO_SHOW = "no_show"


class RSVPDecision(str, Enum):
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class RegistrationSource(str, Enum):
    INVITED = "invited"  # pre-imported by the agent
    ON_SPOT = "on_spot"  # walk-in added by the ground team at the door
    SELF_REG = "self_reg"  # "register interest" on the event microsite


SEAT_HOLDING_STATUSES = frozenset({GuestStatus.CONFIRMED, GuestStatus.ARRIVED})


@dataclass(frozen=True)
class TierDTO:
    """Guest category (VIP, Family, ...) driving waitlist priority and add-on budget."""

    uuid: UUID
    event_id: UUID
    name: str
    add_on_budget: int = 0
    # explicit priority wins over the name keywords of the allocation policy
    waitlist_priority: int | None = None
    requires_room: bool = True

    @classmethod
    def from_model(cls, tier: "Tier") -> "TierDTO":
        return cls(
            uuid=tier.uuid,
            event_id=tier.event_id,
            name=tier.name,
            add_on_budget=tier.add_on_budget,
            waitlist_priority=tier.waitlist_priority,
            requires_room=tier.requires_room,
        )


@dataclass(frozen=True)
class GuestDTO:
    """Snapshot of one guest of one event."""

    uuid: UUID
    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    label_id: UUID | None = None
    status: GuestStatus = GuestStatus.PENDING
    allocated_seats: int = 1
    confirmed_seats: int = 0
    is_on_waitlist: bool = False
    waitlist_priority: int = 0
    registration_source: RegistrationSource = RegistrationSource.INVITED

    def __post_init__(self) -> None:
        if self.allocated_seats < 1:
            raise ValueError(f"Guest {self.uuid} must be allocated at least one seat")
        if not 0 <= self.confirmed_seats <= self.allocated_seats:
            raise ValueError(
                f"Guest {self.uuid} has {self.confirmed_seats} confirmed seats "
                f"for {self.allocated_seats} allocated"
            )
        if (self.confirmed_seats > 0) != (self.status in SEAT_HOLDING_STATUSES):
            raise ValueError(
                f"Guest {self.uuid} cannot hold {self.confirmed_seats} seats while {self.status.value}"
            )
        if self.is_on_waitlist and self.status != GuestStatus.PENDING:
            raise ValueError(f"Guest {self.uuid} cannot be on the waitlist while {self.status.value}")

    @classmethod
    def from_model(cls, guest: "Guest") -> "GuestDTO":
        return cls(
            uuid=guest.uuid,
            event_id=guest.event_id,
            name=guest.name,
            email=guest.email,
            phone=guest.phone,
            label_id=guest.label_id,
            status=GuestStatus(guest.status),
            allocated_seats=guest.allocated_seats,
            confirmed_seats=guest.confirmed_seats,
            is_on_waitlist=guest.is_on_waitlist,
            waitlist_priority=guest.waitlist_priority,
            registration_source=RegistrationSource(guest.registration_source),
        )


@dataclass(frozen=True)
class RSVPOutcome:
    """Result of an RSVP: the guest plus the pool/waitlist state it touched."""

    guest: GuestDTO
    pool: "ResourcePoolDTO | None" = None
    waitlist: "WaitlistQueue | None" = None
    # 1-based waitlist position when the guest was queued
    waitlist_position: int | None = None
    # waiting guests served because this guest left the queue
    promoted: tuple[GuestDTO, ...] = ()

    @property
    def queued(self) -> bool:
        return self.waitlist_position is not None


@dataclass(frozen=True)
class NoShowOutcome:
    guest: GuestDTO
    pool: "ResourcePoolDTO | None" = None
    waitlist: "WaitlistQueue | None" = None
    promoted: tuple[GuestDTO, ...] = ()


@dataclass(frozen=True)
class CheckInStatsDTO:
    total: int
    arrived: int
    confirmed: int
    pending: int
    declined: int
    no_show: int

    @property
    def not_arrived(self) -> int:
        return self.total - self.arrived
