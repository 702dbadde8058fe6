from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from src.guests.dtos import GuestDTO

if TYPE_CHECKING:
    from src.inventory.repository.orm_models import ResourcePool, WaitlistEntry
    from src.inventory.waitlist import WaitlistQueue


class InventoryType(str, Enum):
    HOTEL = "hotel"
    FLIGHT = "flight"


class UtilizationSeverity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(UtilizationSeverity).index(self)


@dataclass(frozen=True)
class ResourcePoolDTO:
    """A block of rooms or seats held for one event."""

    uuid: UUID
    event_id: UUID
    name: str
    inventory_type: InventoryType = InventoryType.HOTEL
    is_primary: bool = False
    blocked: int = 0
    confirmed: int = 0
    valid_from: date | None = None
    valid_to: date | None = None
    negotiated_rate: Decimal | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.confirmed <= self.blocked:
            raise ValueError(
                f"Pool {self.uuid} has {self.confirmed} confirmed units for {self.blocked} blocked"
            )

    @property
    def available(self) -> int:
        return self.blocked - self.confirmed

    @classmethod
    def from_model(cls, pool: "ResourcePool") -> "ResourcePoolDTO":
        return cls(
            uuid=pool.uuid,
            event_id=pool.event_id,
            name=pool.name,
            inventory_type=InventoryType(pool.inventory_type),
            is_primary=pool.is_primary,
            blocked=pool.blocked,
            confirmed=pool.confirmed,
            valid_from=pool.valid_from,
            valid_to=pool.valid_to,
            negotiated_rate=pool.negotiated_rate,
        )


@dataclass(frozen=True, order=True)
class WaitlistEntryDTO:
    """A guest waiting for units of one pool. Orders by (priority, joined_at)."""

    priority: int
    joined_at: datetime
    guest_id: UUID = field(compare=False)
    pool_id: UUID = field(compare=False)
    requested_seats: int = field(default=1, compare=False)

    def __post_init__(self) -> None:
        if self.requested_seats < 1:
            raise ValueError(f"Waitlist entry for {self.guest_id} must request at least one unit")

    @classmethod
    def from_model(cls, entry: "WaitlistEntry") -> "WaitlistEntryDTO":
        return cls(
            priority=entry.priority,
            joined_at=entry.joined_at,
            guest_id=entry.guest_id,
            pool_id=entry.pool_id,
            requested_seats=entry.requested_seats,
        )


@dataclass(frozen=True)
class Granted:
    pool: ResourcePoolDTO
    units: int


@dataclass(frozen=True)
class Queued:
    pool: ResourcePoolDTO
    units: int


@dataclass(frozen=True)
class PoolUtilization:
    pool_id: UUID
    name: str
    blocked: int
    confirmed: int
    available: int
    utilization_pct: int
    severity: UtilizationSeverity
    message: str
    # guests queued for this pool, filled in by the read model
    waitlisted: int = 0


@dataclass(frozen=True)
class AllocationResult:
    """Pool and waitlist after a release, promotion or block resize."""

    pool: ResourcePoolDTO
    waitlist: "WaitlistQueue"
    promoted: tuple[GuestDTO, ...] = ()
    # waitlist entries dropped because their guest was no longer waiting
    dropped: tuple[UUID, ...] = ()
    # guest who left the waitlist on request
    left: GuestDTO | None = None
