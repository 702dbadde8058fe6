from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.decisions import AlreadyRegisteredError, ScheduleConflictError, SessionFullError
from src.itinerary.dtos import SessionDTO
from src.itinerary.scheduler import (
    build_itinerary,
    conflicts_with,
    register,
    switch_session,
    unregister,
)

EVENT_ID = uuid4()
GUEST_ID = uuid4()


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 11, 20, hour, minute, tzinfo=UTC)


def make_session(title, start, end, **kwargs) -> SessionDTO:
    return SessionDTO(
        uuid=uuid4(), event_id=EVENT_ID, title=title, start_time=start, end_time=end, **kwargs
    )


@pytest.fixture
def morning():
    x = make_session("Yoga by the beach", at(10), at(11))
    y = make_session("City tour", at(10, 30), at(11, 30))
    z = make_session("Welcome brunch", at(10), at(12), is_mandatory=True)
    return x, y, z


def test_session_must_start_before_it_ends():
    with pytest.raises(ValueError):
        make_session("Backwards", at(11), at(10))


def test_adjacent_sessions_do_not_conflict():
    first = make_session("Talk", at(9), at(10))
    second = make_session("Lunch", at(10), at(11))

    assert conflicts_with(second, [first]) == ()


def test_overlapping_session_is_a_conflict(morning):
    x, y, _ = morning

    result = register(GUEST_ID, y, [x])

    assert isinstance(result.error, ScheduleConflictError)
    assert result.error.conflicts == (x,)


def test_mandatory_session_needs_no_registration(morning):
    x, _, z = morning

    result = register(GUEST_ID, z, [x])

    assert result.ok
    assert result.value.implicit
    assert result.value.session == z
    assert result.effects == ()


def test_mandatory_sessions_never_block_optional_ones(morning):
    x, _, z = morning

    assert conflicts_with(x, [z]) == ()


def test_register_increments_attendees():
    session = make_session("Cooking class", at(14), at(16), capacity=10, current_attendees=3)

    result = register(GUEST_ID, session, [])

    assert result.value.session.current_attendees == 4
    assert result.value.registration.guest_id == GUEST_ID
    assert result.value.registration.session_id == session.uuid


def test_register_twice_is_rejected():
    session = make_session("Cooking class", at(14), at(16))

    result = register(GUEST_ID, session, [session])

    assert isinstance(result.error, AlreadyRegisteredError)


def test_register_full_session_is_rejected():
    session = make_session("Cooking class", at(14), at(16), capacity=2, current_attendees=2)

    result = register(GUEST_ID, session, [])

    assert isinstance(result.error, SessionFullError)


def test_already_registered_is_reported_before_full():
    session = make_session("Cooking class", at(14), at(16), capacity=1, current_attendees=1)

    assert isinstance(register(GUEST_ID, session, [session]).error, AlreadyRegisteredError)


def test_unregister_is_idempotent():
    session = make_session("Sunset cruise", at(17), at(19), capacity=5, current_attendees=1)

    first = unregister(GUEST_ID, session, [session])
    second = unregister(GUEST_ID, first.value.session, [])

    assert first.value.removed is True
    assert first.value.session.current_attendees == 0
    assert second.value.removed is False
    assert second.value.session.current_attendees == 0
    assert second.effects == ()


def test_unregister_never_goes_below_zero():
    session = make_session("Sunset cruise", at(17), at(19))

    result = unregister(GUEST_ID, session, [session])

    assert result.value.session.current_attendees == 0


def test_switch_session_moves_the_guest(morning):
    x, y, _ = morning
    x = make_session(x.title, x.start_time, x.end_time, current_attendees=1)

    result = switch_session(GUEST_ID, [x], y, [x])

    assert result.ok
    assert result.value.released[0].session.current_attendees == 0
    assert result.value.registered.session.current_attendees == 1


def test_switch_into_a_session_being_left_keeps_the_count(morning):
    x, _, _ = morning
    x = make_session(x.title, x.start_time, x.end_time, capacity=1, current_attendees=1)

    result = switch_session(GUEST_ID, [x], x, [x])

    assert result.ok
    assert result.value.released[0].session.current_attendees == 0
    assert result.value.registered.session.current_attendees == 1


def test_failed_switch_keeps_the_releases(morning):
    x, _, _ = morning
    x = make_session(x.title, x.start_time, x.end_time, current_attendees=1)
    full = make_session("Wine tasting", at(15), at(16), capacity=1, current_attendees=1)

    result = switch_session(GUEST_ID, [x], full, [x])

    assert not result.ok
    assert isinstance(result.error, SessionFullError)
    assert result.value.registered is None
    assert result.value.released[0].removed is True
    assert len(result.effects) == 1


def test_build_itinerary_flags(morning):
    x, y, z = morning
    full = make_session("Wine tasting", at(15), at(16), capacity=1, current_attendees=1)

    items = build_itinerary([full, y, z, x], registered_ids={x.uuid})

    by_title = {item.session.title: item for item in items}
    assert [item.session.start_time for item in items] == sorted(i.session.start_time for i in items)
    assert by_title["Yoga by the beach"].registered
    assert by_title["Welcome brunch"].registered
    assert by_title["City tour"].has_conflict
    assert not by_title["City tour"].registered
    assert by_title["Wine tasting"].is_full
    assert not by_title["Wine tasting"].has_conflict
