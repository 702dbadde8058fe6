"""Freeing and re-granting pool units.

Whenever units come back to a pool (a release, a no-show, a bigger block),
the waitlist is walked in (priority, joined_at) order and served until the
first entry that does not fit. Nobody is skipped: a big party at the head
keeps smaller parties behind it waiting.
"""

from collections.abc import Mapping
from dataclasses import replace
from uuid import UUID

from src.decisions import Decision, InvalidReleaseError, decision
from src.events import DomainEvent, WaitlistLeftEvent, WaitlistPromotedEvent
from src.guests import transitions
from src.guests.dtos import GuestDTO, GuestStatus
from src.inventory.dtos import AllocationResult, Queued, ResourcePoolDTO
from src.inventory.ledger import capacity_alerts, try_confirm
from src.inventory.waitlist import WaitlistQueue
from src.policy import DEFAULT_POLICY, AllocationPolicy


def _serve_waitlist(
    pool: ResourcePoolDTO,
    waitlist: WaitlistQueue,
    guests: Mapping[UUID, GuestDTO],
) -> tuple[AllocationResult, list[DomainEvent]]:
    promoted: list[GuestDTO] = []
    dropped: list[UUID] = []
    effects: list[DomainEvent] = []

    for entry in waitlist.ordered():
        guest = guests.get(entry.guest_id)
        if guest is None or guest.status != GuestStatus.PENDING or not guest.is_on_waitlist:
            # guest declined, went no-show or was confirmed some other way
            dropped.append(entry.guest_id)
            waitlist = waitlist.leave(entry.guest_id)
            continue

        seats = min(entry.requested_seats, guest.allocated_seats)
        outcome = try_confirm(pool, seats)
        if isinstance(outcome, Queued):
            break

        pool = outcome.pool
        waitlist = waitlist.leave(entry.guest_id)
        promoted.append(transitions.promote(guest, seats))
        effects.append(WaitlistPromotedEvent(guest_id=guest.uuid, pool_id=pool.uuid, seats=seats))

    result = AllocationResult(
        pool=pool, waitlist=waitlist, promoted=tuple(promoted), dropped=tuple(dropped)
    )
    return result, effects


@decision
def promote_next(
    pool: ResourcePoolDTO,
    waitlist: WaitlistQueue,
    guests: Mapping[UUID, GuestDTO],
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> Decision[AllocationResult]:
    result, effects = _serve_waitlist(pool, waitlist, guests)
    effects.extend(capacity_alerts(pool, result.pool, policy))
    return Decision.success(result, effects)


@decision
def release(
    pool: ResourcePoolDTO,
    units: int,
    waitlist: WaitlistQueue,
    guests: Mapping[UUID, GuestDTO],
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> Decision[AllocationResult]:
    """Give ``units`` back to the pool and promote whoever now fits."""
    if units < 1:
        raise InvalidReleaseError(f"Cannot release {units} units")
    if units > pool.confirmed:
        raise InvalidReleaseError(
            f"Cannot release {units} units from pool {pool.uuid}. Only {pool.confirmed} confirmed."
        )
    freed = replace(pool, confirmed=pool.confirmed - units)
    result, effects = _serve_waitlist(freed, waitlist, guests)
    effects.extend(capacity_alerts(pool, result.pool, policy))
    return Decision.success(result, effects)


@decision
def resize_block(
    pool: ResourcePoolDTO,
    blocked: int,
    waitlist: WaitlistQueue,
    guests: Mapping[UUID, GuestDTO],
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> Decision[AllocationResult]:
    """Change the number of units the supplier holds for the event."""
    if blocked < pool.confirmed:
        raise InvalidReleaseError(
            f"Cannot shrink pool {pool.uuid} to {blocked} units. {pool.confirmed} already confirmed."
        )
    resized = replace(pool, blocked=blocked)
    if blocked > pool.blocked:
        result, effects = _serve_waitlist(resized, waitlist, guests)
    else:
        result, effects = AllocationResult(pool=resized, waitlist=waitlist), []
    effects.extend(capacity_alerts(pool, result.pool, policy))
    return Decision.success(result, effects)


@decision
def leave_waitlist(
    pool: ResourcePoolDTO,
    waitlist: WaitlistQueue,
    guest: GuestDTO,
    guests: Mapping[UUID, GuestDTO],
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> Decision[AllocationResult]:
    """Take a guest off the waitlist. Guests behind a blocking head may now fit."""
    if guest.uuid not in waitlist:
        return Decision.success(AllocationResult(pool=pool, waitlist=waitlist))

    left = transitions.unqueue(guest)
    remaining = waitlist.leave(guest.uuid)
    others = {**guests, guest.uuid: left}
    result, effects = _serve_waitlist(pool, remaining, others)
    effects.insert(0, WaitlistLeftEvent(guest_id=guest.uuid, pool_id=pool.uuid))
    effects.extend(capacity_alerts(pool, result.pool, policy))
    return Decision.success(replace(result, left=left), effects)
