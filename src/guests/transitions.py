"""Guest status transitions.

Pure functions over ``GuestDTO`` snapshots. They validate the move against
``GUEST_TRANSITIONS`` and return the new snapshot; pool and waitlist effects
live in ``src.guests.state_machine`` and ``src.inventory.allocation``.
"""

from dataclasses import replace

from src.decisions import InvalidTransitionError
from src.guests.dtos import GuestDTO, GuestStatus

GUEST_TRANSITIONS: dict[GuestStatus, frozenset[GuestStatus]] = {
    GuestStatus.PENDING: frozenset(
        {GuestStatus.CONFIRMED, GuestStatus.DECLINED, GuestStatus.NO_SHOW}
    ),
    GuestStatus.CONFIRMED: frozenset({GuestStatus.ARRIVED, GuestStatus.NO_SHOW}),
    GuestStatus.DECLINED: frozenset(),
    GuestStatus.ARRIVED: frozenset(),
    GuestStatus.NO_SHOW: frozenset(),
}


def can_transition(current: GuestStatus, target: GuestStatus) -> bool:
    return target in GUEST_TRANSITIONS.get(current, frozenset())


def assert_transition(guest: GuestDTO, target: GuestStatus) -> None:
    if not can_transition(guest.status, target):
        raise InvalidTransitionError("guest", guest.status.value, target.value)


def confirm(guest: GuestDTO, seats: int) -> GuestDTO:
    assert_transition(guest, GuestStatus.CONFIRMED)
    return replace(
        guest, status=GuestStatus.CONFIRMED, confirmed_seats=seats, is_on_waitlist=False
    )


def promote(guest: GuestDTO, seats: int) -> GuestDTO:
    """Confirm a queued guest whose waitlist entry was granted."""
    if not guest.is_on_waitlist:
        raise InvalidTransitionError("guest", "not queued", GuestStatus.CONFIRMED.value)
    return confirm(guest, seats)


def queue(guest: GuestDTO, priority: int) -> GuestDTO:
    if guest.status != GuestStatus.PENDING:
        raise InvalidTransitionError("guest", guest.status.value, "waitlisted")
    return replace(guest, is_on_waitlist=True, waitlist_priority=priority)


def decline(guest: GuestDTO) -> GuestDTO:
    assert_transition(guest, GuestStatus.DECLINED)
    return replace(guest, status=GuestStatus.DECLINED, confirmed_seats=0, is_on_waitlist=False)


def arrive(guest: GuestDTO) -> GuestDTO:
    assert_transition(guest, GuestStatus.ARRIVED)
    return replace(guest, status=GuestStatus.ARRIVED)


def no_show(guest: GuestDTO) -> GuestDTO:
    assert_transition(guest, GuestStatus.NO_SHOW)
    return replace(guest, status=GuestStatus.NO_SHOW, confirmed_seats=0, is_on_waitlist=False)


def unqueue(guest: GuestDTO) -> GuestDTO:
    return replace(guest, is_on_waitlist=False)
