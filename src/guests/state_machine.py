"""RSVP, check-in and no-show decisions for a single guest.

Confirming may need a unit of the event's primary pool (a hotel room). The
pool and its waitlist are passed in as snapshots and come back updated in the
outcome; nothing is written here.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from uuid import UUID, uuid4

from src.decisions import AlreadyQueuedError, Decision, InvalidSeatCountError, decision
from src.events import (
    DomainEvent,
    GuestArrivedEvent,
    GuestConfirmedEvent,
    GuestDeclinedEvent,
    GuestNoShowEvent,
    GuestWaitlistedEvent,
)
from src.guests import transitions
from src.guests.dtos import (
    GuestDTO,
    GuestStatus,
    NoShowOutcome,
    RegistrationSource,
    RSVPDecision,
    RSVPOutcome,
    TierDTO,
)
from src.inventory.allocation import leave_waitlist, release
from src.inventory.dtos import Granted, ResourcePoolDTO, WaitlistEntryDTO
from src.inventory.ledger import capacity_alerts, try_confirm
from src.inventory.waitlist import WaitlistQueue, waitlist_priority_for
from src.policy import DEFAULT_POLICY, AllocationPolicy


def requires_room(tier: TierDTO | None) -> bool:
    return tier is not None and tier.requires_room


@decision
def submit_rsvp(
    guest: GuestDTO,
    rsvp: RSVPDecision,
    requested_seats: int | None = None,
    *,
    tier: TierDTO | None = None,
    pool: ResourcePoolDTO | None = None,
    waitlist: WaitlistQueue | None = None,
    guests: Mapping[UUID, GuestDTO] | None = None,
    now: datetime | None = None,
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> Decision[RSVPOutcome]:
    """Apply a guest's RSVP.

    Declining always succeeds from pending and takes the guest off any
    waitlist. Confirming takes ``requested_seats`` units of ``pool`` when the
    guest's tier needs a room; with no unit left, or with someone queued who
    is served first, the guest joins the waitlist and stays pending.
    """
    if rsvp == RSVPDecision.DECLINED:
        declined = transitions.decline(guest)
        effects: list[DomainEvent] = [GuestDeclinedEvent(guest_id=guest.uuid)]
        if pool is None or waitlist is None or guest.uuid not in waitlist:
            return Decision.success(
                RSVPOutcome(guest=declined, pool=pool, waitlist=waitlist), effects
            )
        allocation = leave_waitlist(pool, waitlist, guest, guests or {}, policy)
        result = allocation.unwrap()
        effects.extend(allocation.effects)
        return Decision.success(
            RSVPOutcome(
                guest=declined,
                pool=result.pool,
                waitlist=result.waitlist,
                promoted=result.promoted,
            ),
            effects,
        )

    transitions.assert_transition(guest, GuestStatus.CONFIRMED)
    seats = guest.allocated_seats if requested_seats is None else requested_seats
    if not 1 <= seats <= guest.allocated_seats:
        raise InvalidSeatCountError(seats, guest.allocated_seats)
    if guest.is_on_waitlist:
        raise AlreadyQueuedError(guest.uuid, pool.uuid if pool else None)

    if not requires_room(tier) or pool is None:
        confirmed = transitions.confirm(guest, seats)
        return Decision.success(
            RSVPOutcome(guest=confirmed, pool=pool, waitlist=waitlist),
            [GuestConfirmedEvent(guest_id=guest.uuid, seats=seats)],
        )

    waitlist = waitlist if waitlist is not None else WaitlistQueue(pool_id=pool.uuid)
    now = now or datetime.now(UTC)
    priority = waitlist_priority_for(tier, policy)

    if not waitlist.serves_before(priority, now):
        outcome = try_confirm(pool, seats)
        if isinstance(outcome, Granted):
            confirmed = transitions.confirm(guest, seats)
            effects = [GuestConfirmedEvent(guest_id=guest.uuid, seats=seats)]
            effects.extend(capacity_alerts(pool, outcome.pool, policy))
            return Decision.success(
                RSVPOutcome(guest=confirmed, pool=outcome.pool, waitlist=waitlist), effects
            )

    queued = transitions.queue(guest, priority)
    waitlist = waitlist.join(
        WaitlistEntryDTO(
            priority=priority,
            joined_at=now,
            guest_id=guest.uuid,
            pool_id=pool.uuid,
            requested_seats=seats,
        )
    )
    position = waitlist.position(guest.uuid)
    return Decision.success(
        RSVPOutcome(guest=queued, pool=pool, waitlist=waitlist, waitlist_position=position),
        [GuestWaitlistedEvent(guest_id=guest.uuid, pool_id=pool.uuid, position=position)],
    )


@decision
def check_in(guest: GuestDTO) -> Decision[GuestDTO]:
    arrived = transitions.arrive(guest)
    return Decision.success(arrived, [GuestArrivedEvent(guest_id=guest.uuid)])


@decision
def mark_no_show(
    guest: GuestDTO,
    *,
    pool: ResourcePoolDTO | None = None,
    waitlist: WaitlistQueue | None = None,
    guests: Mapping[UUID, GuestDTO] | None = None,
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> Decision[NoShowOutcome]:
    """Mark a guest as not coming.

    ``pool`` is the pool holding the guest's units, if any. Those units are
    released in the same decision so the next waiting guests get promoted.
    """
    if guest.status == GuestStatus.NO_SHOW:
        return Decision.success(NoShowOutcome(guest=guest, pool=pool, waitlist=waitlist))

    released_seats = guest.confirmed_seats
    gone = transitions.no_show(guest)
    effects: list[DomainEvent] = [
        GuestNoShowEvent(guest_id=guest.uuid, released_seats=released_seats)
    ]
    if pool is None:
        return Decision.success(NoShowOutcome(guest=gone, pool=pool, waitlist=waitlist), effects)

    waitlist = waitlist if waitlist is not None else WaitlistQueue(pool_id=pool.uuid)
    others = {**(guests or {}), guest.uuid: gone}
    if released_seats:
        allocation = release(pool, released_seats, waitlist, others, policy)
    elif guest.uuid in waitlist:
        allocation = leave_waitlist(pool, waitlist, guest, others, policy)
    else:
        return Decision.success(NoShowOutcome(guest=gone, pool=pool, waitlist=waitlist), effects)

    result = allocation.unwrap()
    effects.extend(allocation.effects)
    return Decision.success(
        NoShowOutcome(
            guest=gone, pool=result.pool, waitlist=result.waitlist, promoted=result.promoted
        ),
        effects,
    )


@decision
def register_guest(
    event_id: UUID,
    name: str,
    *,
    source: RegistrationSource = RegistrationSource.INVITED,
    email: str | None = None,
    phone: str | None = None,
    allocated_seats: int = 1,
    tier: TierDTO | None = None,
    pool: ResourcePoolDTO | None = None,
    waitlist: WaitlistQueue | None = None,
    now: datetime | None = None,
    policy: AllocationPolicy = DEFAULT_POLICY,
    guest_id: UUID | None = None,
) -> Decision[RSVPOutcome]:
    """Create a pending guest. Walk-ins are confirmed right away for one seat."""
    guest = GuestDTO(
        uuid=guest_id or uuid4(),
        event_id=event_id,
        name=name,
        email=email,
        phone=phone,
        label_id=tier.uuid if tier else None,
        allocated_seats=allocated_seats,
        registration_source=source,
    )
    if source != RegistrationSource.ON_SPOT:
        return Decision.success(RSVPOutcome(guest=guest, pool=pool, waitlist=waitlist))

    return submit_rsvp(
        guest,
        RSVPDecision.CONFIRMED,
        1,
        tier=tier,
        pool=pool,
        waitlist=waitlist,
        now=now,
        policy=policy,
    )
