"""Registration of guests for optional programme sessions.

Two sessions overlap when ``a.start < b.end and b.start < a.end``, so a
session ending at 11:00 and one starting at 11:00 do not. Mandatory sessions
are attended by everyone and never take part in conflict checks.
"""

from collections.abc import Collection, Iterable
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from src.decisions import (
    AlreadyRegisteredError,
    Decision,
    ScheduleConflictError,
    SessionFullError,
    decision,
)
from src.events import DomainEvent, SessionRegisteredEvent, SessionUnregisteredEvent
from src.itinerary.dtos import (
    ItineraryItem,
    RegistrationDTO,
    RegistrationOutcome,
    SessionDTO,
    SwitchOutcome,
    UnregistrationOutcome,
)


def overlaps(a: SessionDTO, b: SessionDTO) -> bool:
    return a.start_time < b.end_time and b.start_time < a.end_time


def conflicts_with(
    session: SessionDTO, registered_sessions: Iterable[SessionDTO]
) -> tuple[SessionDTO, ...]:
    if session.is_mandatory:
        return ()
    return tuple(
        other
        for other in registered_sessions
        if other.uuid != session.uuid and not other.is_mandatory and overlaps(session, other)
    )


@decision
def register(
    guest_id: UUID,
    session: SessionDTO,
    registered_sessions: Iterable[SessionDTO],
    now: datetime | None = None,
) -> Decision[RegistrationOutcome]:
    if session.is_mandatory:
        return Decision.success(RegistrationOutcome(session=session))

    registered_sessions = tuple(registered_sessions)
    if any(s.uuid == session.uuid for s in registered_sessions):
        raise AlreadyRegisteredError(guest_id, session.uuid)
    conflicts = conflicts_with(session, registered_sessions)
    if conflicts:
        raise ScheduleConflictError(session.uuid, conflicts)
    if session.is_full:
        raise SessionFullError(session.uuid, session.capacity)

    registration = RegistrationDTO(
        guest_id=guest_id, session_id=session.uuid, registered_at=now or datetime.now(UTC)
    )
    return Decision.success(
        RegistrationOutcome(
            session=replace(session, current_attendees=session.current_attendees + 1),
            registration=registration,
        ),
        [SessionRegisteredEvent(guest_id=guest_id, session_id=session.uuid)],
    )


@decision
def unregister(
    guest_id: UUID, session: SessionDTO, registered_sessions: Iterable[SessionDTO]
) -> Decision[UnregistrationOutcome]:
    """Drop a registration. Unregistering twice is the same as once."""
    if session.is_mandatory or not any(s.uuid == session.uuid for s in registered_sessions):
        return Decision.success(UnregistrationOutcome(session=session, removed=False))

    return Decision.success(
        UnregistrationOutcome(
            session=replace(session, current_attendees=max(0, session.current_attendees - 1)),
            removed=True,
        ),
        [SessionUnregisteredEvent(guest_id=guest_id, session_id=session.uuid)],
    )


def switch_session(
    guest_id: UUID,
    from_sessions: Iterable[SessionDTO],
    to_session: SessionDTO,
    registered_sessions: Iterable[SessionDTO],
    now: datetime | None = None,
) -> Decision[SwitchOutcome]:
    """Leave ``from_sessions`` and join ``to_session``.

    Not atomic: when joining fails the guest stays unregistered from the
    sessions they left. The failed decision carries those releases so the
    caller can persist them.
    """
    remaining = {s.uuid: s for s in registered_sessions}
    released: list[UnregistrationOutcome] = []
    effects: list[DomainEvent] = []

    for session in from_sessions:
        result = unregister(guest_id, session, remaining.values())
        released.append(result.value)
        effects.extend(result.effects)
        remaining.pop(session.uuid, None)

    # switching back into a session just left starts from its released count
    for outcome in released:
        if outcome.session.uuid == to_session.uuid:
            to_session = outcome.session

    joined = register(guest_id, to_session, remaining.values(), now)
    if not joined.ok:
        return Decision.failure(
            joined.error, value=SwitchOutcome(released=tuple(released)), effects=effects
        )
    effects.extend(joined.effects)
    return Decision.success(
        SwitchOutcome(released=tuple(released), registered=joined.value), effects
    )


def build_itinerary(
    sessions: Iterable[SessionDTO], registered_ids: Collection[UUID]
) -> list[ItineraryItem]:
    """Guest view of the programme, in start time order."""
    sessions = sorted(sessions, key=lambda s: (s.start_time, s.end_time))
    attending = [s for s in sessions if s.uuid in registered_ids]
    items = []
    for session in sessions:
        registered = session.is_mandatory or session.uuid in registered_ids
        items.append(
            ItineraryItem(
                session=session,
                registered=registered,
                has_conflict=not registered and bool(conflicts_with(session, attending)),
                is_full=session.is_full,
            )
        )
    return items
