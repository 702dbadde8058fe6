"""Decision values returned by the allocation engine.

Every core operation is a pure function of the snapshots it is given. It
returns a ``Decision``: the new state, the side effects the caller has to
dispatch, or the error kind that stopped it. Errors are ordinary exception
classes so they can carry context (the conflicting sessions, the current
status, ...), but they never cross the core boundary as raised exceptions:
``@decision`` catches them and folds them into the returned value.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, Any, Generic, ParamSpec, TypeVar

if TYPE_CHECKING:
    from src.events import DomainEvent

T = TypeVar("T")
P = ParamSpec("P")


class EngineError(Exception):
    """Base class for every error kind the engine reports."""

    code: str = "engine_error"


class InvalidTransitionError(EngineError):
    """A status change that is not allowed from the current state."""

    code = "invalid_transition"

    def __init__(self, entity: str, current: str, target: str) -> None:
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Cannot move {entity} from '{current}' to '{target}'")


class InvalidSeatCountError(EngineError):
    code = "invalid_seat_count"

    def __init__(self, requested: int, allocated: int) -> None:
        self.requested = requested
        self.allocated = allocated
        super().__init__(
            f"Cannot confirm {requested} seats. Only {allocated} allocated."
        )


class InvalidReleaseError(EngineError):
    code = "invalid_release"


class AlreadyQueuedError(EngineError):
    code = "already_queued"

    def __init__(self, guest_id, pool_id) -> None:
        self.guest_id = guest_id
        self.pool_id = pool_id
        super().__init__(f"Guest {guest_id} is already on the waitlist of pool {pool_id}")


class AlreadyRegisteredError(EngineError):
    code = "already_registered"

    def __init__(self, guest_id, session_id) -> None:
        self.guest_id = guest_id
        self.session_id = session_id
        super().__init__(f"Guest {guest_id} is already registered for session {session_id}")


class SessionFullError(EngineError):
    code = "full"

    def __init__(self, session_id, capacity: int) -> None:
        self.session_id = session_id
        self.capacity = capacity
        super().__init__(f"Session {session_id} is full ({capacity} attendees)")


class ScheduleConflictError(EngineError):
    """Registration overlaps sessions the guest already attends."""

    code = "conflict"

    def __init__(self, session_id, conflicts: Iterable[Any]) -> None:
        self.session_id = session_id
        self.conflicts = tuple(conflicts)
        titles = ", ".join(getattr(c, "title", str(c)) for c in self.conflicts)
        super().__init__(f"Session {session_id} overlaps with: {titles}")


@dataclass(frozen=True)
class Decision(Generic[T]):
    value: T | None = None
    effects: tuple["DomainEvent", ...] = ()
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, effects: Iterable["DomainEvent"] = ()) -> "Decision[T]":
        return cls(value=value, effects=tuple(effects))

    @classmethod
    def failure(
        cls,
        error: EngineError,
        value: T | None = None,
        effects: Iterable["DomainEvent"] = (),
    ) -> "Decision[T]":
        return cls(value=value, effects=tuple(effects), error=error)

    def unwrap(self) -> T:
        """Return the value, re-raising the error. For composing decisions inside the core."""
        if self.error is not None:
            raise self.error
        return self.value


def decision(func: Callable[P, Decision[T]]) -> Callable[P, Decision[T]]:
    """Turn an ``EngineError`` raised by a core operation into a failed ``Decision``."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Decision[T]:
        try:
            return func(*args, **kwargs)
        except EngineError as e:
            return Decision.failure(e)

    return wrapper
