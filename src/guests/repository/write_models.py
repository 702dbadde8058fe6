"""Guest write models - RSVP, check-in, no-show and registration.

Each operation loads the guest, its tier and (when rooms are involved) the
primary pool with its waitlist, asks ``src.guests.state_machine`` for a
decision and persists the returned snapshots. Failed decisions are returned
untouched and nothing is written.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.settings import settings
from src.decisions import Decision
from src.guests import state_machine
from src.guests.dtos import (
    GuestDTO,
    NoShowOutcome,
    RegistrationSource,
    RSVPDecision,
    RSVPOutcome,
    TierDTO,
)
from src.guests.repository.orm_models import Guest, Tier
from src.inventory.dtos import ResourcePoolDTO
from src.inventory.repository.orm_models import ResourcePool
from src.inventory.repository.write_models import PoolRows, apply_guest
from src.inventory.waitlist import WaitlistQueue
from src.locks import ResourceLocks, resource_locks
from src.models.errors import RecordNotFoundError
from src.models.event import Event
from src.notifications import NotificationDispatcherBase, get_notification_dispatcher
from src.policy import AllocationPolicy

logger = logging.getLogger(__name__)


class GuestWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(
        self, guest_id: UUID, rsvp: RSVPDecision, requested_seats: int | None = None
    ) -> Decision[RSVPOutcome]:
        raise NotImplementedError

    @abstractmethod
    async def check_in(self, guest_id: UUID) -> Decision[GuestDTO]:
        raise NotImplementedError

    @abstractmethod
    async def mark_no_show(self, guest_id: UUID) -> Decision[NoShowOutcome]:
        raise NotImplementedError

    @abstractmethod
    async def register_guest(
        self,
        event_id: UUID,
        name: str,
        source: RegistrationSource = RegistrationSource.INVITED,
        email: str | None = None,
        phone: str | None = None,
        allocated_seats: int = 1,
        label_id: UUID | None = None,
    ) -> Decision[RSVPOutcome]:
        raise NotImplementedError


def walk_in_booking_ref() -> str:
    return f"WALK-{1000 + secrets.randbelow(9000)}"


def _lock_keys(pool_id: UUID | None, guest_id: UUID) -> list:
    keys = [ResourceLocks.guest(guest_id)]
    if pool_id is not None:
        keys.append(ResourceLocks.pool(pool_id))
    return keys


class SqlGuestWriteModel(GuestWriteModel):
    """Write operations for guests. Returns decisions over DTOs, never ORM models."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        dispatcher: NotificationDispatcherBase | None = None,
        locks: ResourceLocks | None = None,
        policy: AllocationPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._dispatcher = dispatcher or get_notification_dispatcher()
        self._locks = locks or resource_locks
        self._policy = policy or settings.allocation_policy()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def _primary_pool_id_for(self, guest_id: UUID) -> UUID | None:
        """Look up the pool to lock before touching the guest row."""
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = select(Guest.event_id).where(Guest.uuid == guest_id)
            event_id = (await session.execute(stmt)).scalar_one_or_none()
            if event_id is None:
                raise RecordNotFoundError("Guest", guest_id)
            return await PoolRows(session).primary_pool_id(event_id)

    async def _tier(self, session: AsyncSession, label_id: UUID | None) -> TierDTO | None:
        if label_id is None:
            return None
        tier = await session.get(Tier, label_id)
        return TierDTO.from_model(tier) if tier else None

    async def _pool_state(
        self, rows: PoolRows, pool_id: UUID | None, exclude: UUID | None = None
    ) -> tuple[ResourcePool | None, ResourcePoolDTO | None, WaitlistQueue | None, dict]:
        if pool_id is None:
            return None, None, None, {}
        row = await rows.pool(pool_id)
        waitlist = await rows.waitlist(pool_id)
        waiting = await rows.guests(e.guest_id for e in waitlist.ordered() if e.guest_id != exclude)
        return row, ResourcePoolDTO.from_model(row), waitlist, waiting

    async def _persist(
        self,
        rows: PoolRows,
        guest_row: Guest,
        guest: GuestDTO,
        pool_row: ResourcePool | None,
        waitlist_before: WaitlistQueue | None,
        outcome: RSVPOutcome | NoShowOutcome,
    ) -> None:
        if pool_row is not None and outcome.pool is not None:
            rows.apply_pool(pool_row, outcome.pool)
        if waitlist_before is not None and outcome.waitlist is not None:
            await rows.save_waitlist(waitlist_before, outcome.waitlist)
        await rows.save_guests(outcome.promoted)
        apply_guest(guest_row, guest)
        await rows.session.flush()

    async def submit_rsvp(
        self, guest_id: UUID, rsvp: RSVPDecision, requested_seats: int | None = None
    ) -> Decision[RSVPOutcome]:
        pool_id = await self._primary_pool_id_for(guest_id)
        async with self._locks.hold(*_lock_keys(pool_id, guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = PoolRows(session)
                pool_row, pool, waitlist, waiting = await self._pool_state(rows, pool_id, exclude=guest_id)
                guest_row = await rows.guest(guest_id)
                guest = GuestDTO.from_model(guest_row)
                tier = await self._tier(session, guest.label_id)

                result = state_machine.submit_rsvp(
                    guest,
                    rsvp,
                    requested_seats,
                    tier=tier,
                    pool=pool,
                    waitlist=waitlist,
                    guests=waiting,
                    now=self._clock(),
                    policy=self._policy,
                )
                if not result.ok:
                    logger.warning(f"RSVP of guest {guest_id} rejected: {result.error}")
                    return result

                outcome = result.value
                await self._persist(rows, guest_row, outcome.guest, pool_row, waitlist, outcome)

        if outcome.queued:
            logger.info(f"Guest {guest_id} waitlisted at position {outcome.waitlist_position}")
        else:
            logger.info(f"Guest {guest_id} RSVP recorded: {outcome.guest.status.value}")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def check_in(self, guest_id: UUID) -> Decision[GuestDTO]:
        async with self._locks.hold(ResourceLocks.guest(guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                guest_row = await PoolRows(session).guest(guest_id)
                result = state_machine.check_in(GuestDTO.from_model(guest_row))
                if not result.ok:
                    logger.warning(f"Check-in of guest {guest_id} rejected: {result.error}")
                    return result
                apply_guest(guest_row, result.value)
                await session.flush()

        logger.info(f"Guest {guest_id} checked in")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def mark_no_show(self, guest_id: UUID) -> Decision[NoShowOutcome]:
        pool_id = await self._primary_pool_id_for(guest_id)
        async with self._locks.hold(*_lock_keys(pool_id, guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = PoolRows(session)
                guest_row = await rows.guest(guest_id)
                guest = GuestDTO.from_model(guest_row)
                tier = await self._tier(session, guest.label_id)
                if not (state_machine.requires_room(tier) or guest.is_on_waitlist):
                    # the guest never held a unit of the pool
                    pool_id = None
                pool_row, pool, waitlist, waiting = await self._pool_state(rows, pool_id, exclude=guest_id)

                result = state_machine.mark_no_show(
                    guest, pool=pool, waitlist=waitlist, guests=waiting, policy=self._policy
                )
                if not result.ok:
                    logger.warning(f"No-show of guest {guest_id} rejected: {result.error}")
                    return result

                outcome = result.value
                await self._persist(rows, guest_row, outcome.guest, pool_row, waitlist, outcome)

        promoted = [str(g.uuid) for g in outcome.promoted]
        logger.info(f"Guest {guest_id} marked no-show, promoted {promoted or 'nobody'}")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def register_guest(
        self,
        event_id: UUID,
        name: str,
        source: RegistrationSource = RegistrationSource.INVITED,
        email: str | None = None,
        phone: str | None = None,
        allocated_seats: int = 1,
        label_id: UUID | None = None,
    ) -> Decision[RSVPOutcome]:
        guest_id = uuid4()
        pool_id = None
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            if await session.get(Event, event_id) is None:
                raise RecordNotFoundError("Event", event_id)
            if source == RegistrationSource.ON_SPOT:
                pool_id = await PoolRows(session).primary_pool_id(event_id)

        async with self._locks.hold(*_lock_keys(pool_id, guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = PoolRows(session)
                tier = await self._tier(session, label_id)
                if label_id is not None and tier is None:
                    raise RecordNotFoundError("Tier", label_id)
                pool_row, pool, waitlist, waiting = await self._pool_state(rows, pool_id)

                result = state_machine.register_guest(
                    event_id,
                    name,
                    source=source,
                    email=email,
                    phone=phone,
                    allocated_seats=allocated_seats,
                    tier=tier,
                    pool=pool,
                    waitlist=waitlist,
                    now=self._clock(),
                    policy=self._policy,
                    guest_id=guest_id,
                )
                if not result.ok:
                    logger.warning(f"Registration of {name} rejected: {result.error}")
                    return result

                outcome = result.value
                guest_row = Guest(
                    uuid=guest_id,
                    event_id=event_id,
                    name=name,
                    email=email,
                    phone=phone,
                    label_id=label_id,
                    registration_source=source,
                    booking_ref=walk_in_booking_ref() if source == RegistrationSource.ON_SPOT else None,
                )
                apply_guest(guest_row, outcome.guest)
                session.add(guest_row)
                # the guest row must exist before its waitlist entry
                await session.flush()
                await self._persist(rows, guest_row, outcome.guest, pool_row, waitlist, outcome)

        logger.info(
            f"Registered guest {guest_id} ({source.value}) for event {event_id}: "
            f"{outcome.guest.status.value}"
        )
        await self._dispatcher.dispatch(result.effects)
        return result
