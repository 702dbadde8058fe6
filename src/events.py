"""
Domain events emitted by the allocation engine.

Core operations never notify anyone themselves; they return these events as
side effects. After the new state is committed, a notification dispatcher
consumes them for:
- Guest emails and agent toasts
- Audit logging
- Message bus integration
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base domain event."""

    event_type: ClassVar[str] = ""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, kw_only=True)
class GuestConfirmedEvent(DomainEvent):
    """Fired when a guest's RSVP is confirmed with a number of seats."""

    event_type: ClassVar[str] = "guest.confirmed"

    guest_id: UUID
    seats: int


@dataclass(frozen=True, kw_only=True)
class GuestDeclinedEvent(DomainEvent):
    event_type: ClassVar[str] = "guest.declined"

    guest_id: UUID


@dataclass(frozen=True, kw_only=True)
class GuestWaitlistedEvent(DomainEvent):
    """Fired when a confirmation found no free unit and the guest was queued."""

    event_type: ClassVar[str] = "guest.waitlisted"

    guest_id: UUID
    pool_id: UUID
    position: int


@dataclass(frozen=True, kw_only=True)
class WaitlistPromotedEvent(DomainEvent):
    """Fired when a queued guest is granted units off the waitlist."""

    event_type: ClassVar[str] = "guest.waitlist_promoted"

    guest_id: UUID
    pool_id: UUID
    seats: int


@dataclass(frozen=True, kw_only=True)
class WaitlistLeftEvent(DomainEvent):
    event_type: ClassVar[str] = "guest.waitlist_left"

    guest_id: UUID
    pool_id: UUID


@dataclass(frozen=True, kw_only=True)
class GuestArrivedEvent(DomainEvent):
    event_type: ClassVar[str] = "guest.arrived"

    guest_id: UUID


@dataclass(frozen=True, kw_only=True)
class GuestNoShowEvent(DomainEvent):
    event_type: ClassVar[str] = "guest.no_show"

    guest_id: UUID
    released_seats: int = 0


@dataclass(frozen=True, kw_only=True)
class CapacityAlertEvent(DomainEvent):
    """Fired when a pool's utilization crosses into warning or critical."""

    event_type: ClassVar[str] = "inventory.capacity_alert"

    pool_id: UUID
    severity: str
    message: str


@dataclass(frozen=True, kw_only=True)
class RequestDecidedEvent(DomainEvent):
    """Fired when a perk/add-on request gets a status, at creation or on review."""

    event_type: ClassVar[str] = "request.decided"

    request_id: UUID
    guest_id: UUID
    status: str


@dataclass(frozen=True, kw_only=True)
class SessionRegisteredEvent(DomainEvent):
    event_type: ClassVar[str] = "itinerary.registered"

    guest_id: UUID
    session_id: UUID


@dataclass(frozen=True, kw_only=True)
class SessionUnregisteredEvent(DomainEvent):
    event_type: ClassVar[str] = "itinerary.unregistered"

    guest_id: UUID
    session_id: UUID
