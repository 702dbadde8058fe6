"""Inventory write models - load snapshots, call the ledger, persist the result.

Rows of the pool, its waitlist and the waiting guests are read ``FOR UPDATE``
and the in-process ``ResourceLocks`` are held for the whole transaction, so
two confirmations can never both take the last room.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.settings import settings
from src.decisions import Decision
from src.guests.dtos import GuestDTO
from src.guests.repository.orm_models import Guest
from src.inventory import allocation
from src.inventory.dtos import AllocationResult, Granted, Queued, ResourcePoolDTO, WaitlistEntryDTO
from src.inventory.ledger import capacity_alerts, try_confirm
from src.inventory.repository.orm_models import ResourcePool, WaitlistEntry
from src.inventory.waitlist import WaitlistQueue
from src.locks import ResourceLocks, resource_locks
from src.models.errors import RecordNotFoundError
from src.notifications import NotificationDispatcherBase, get_notification_dispatcher
from src.policy import AllocationPolicy

logger = logging.getLogger(__name__)


class PoolRows:
    """Row-level access shared by the write models that touch a pool."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def pool(self, pool_id: UUID) -> ResourcePool:
        stmt = select(ResourcePool).where(ResourcePool.uuid == pool_id).with_for_update()
        pool = (await self.session.execute(stmt)).scalar_one_or_none()
        if pool is None:
            raise RecordNotFoundError("Resource pool", pool_id)
        return pool

    async def primary_pool(self, event_id: UUID) -> ResourcePool | None:
        stmt = (
            select(ResourcePool)
            .where(ResourcePool.event_id == event_id, ResourcePool.is_primary.is_(True))
            .with_for_update()
        )
        return (await self.session.execute(stmt)).scalars().first()

    async def primary_pool_id(self, event_id: UUID) -> UUID | None:
        stmt = select(ResourcePool.uuid).where(
            ResourcePool.event_id == event_id, ResourcePool.is_primary.is_(True)
        )
        return (await self.session.execute(stmt)).scalars().first()

    async def waitlist(self, pool_id: UUID) -> WaitlistQueue:
        stmt = select(WaitlistEntry).where(WaitlistEntry.pool_id == pool_id).with_for_update()
        rows = (await self.session.execute(stmt)).scalars().all()
        return WaitlistQueue.of(pool_id, [WaitlistEntryDTO.from_model(r) for r in rows])

    async def guests(self, guest_ids: Iterable[UUID]) -> dict[UUID, GuestDTO]:
        guest_ids = list(guest_ids)
        if not guest_ids:
            return {}
        stmt = select(Guest).where(Guest.uuid.in_(guest_ids)).with_for_update()
        rows = (await self.session.execute(stmt)).scalars().all()
        return {row.uuid: GuestDTO.from_model(row) for row in rows}

    async def guest(self, guest_id: UUID) -> Guest:
        stmt = select(Guest).where(Guest.uuid == guest_id).with_for_update()
        guest = (await self.session.execute(stmt)).scalar_one_or_none()
        if guest is None:
            raise RecordNotFoundError("Guest", guest_id)
        return guest

    @staticmethod
    def apply_pool(row: ResourcePool, pool: ResourcePoolDTO) -> None:
        row.blocked = pool.blocked
        row.confirmed = pool.confirmed

    async def save_guests(self, guests: Iterable[GuestDTO]) -> None:
        guests = list(guests)
        if not guests:
            return
        stmt = select(Guest).where(Guest.uuid.in_([g.uuid for g in guests]))
        rows = {row.uuid: row for row in (await self.session.execute(stmt)).scalars().all()}
        for guest in guests:
            apply_guest(rows[guest.uuid], guest)

    async def save_waitlist(self, before: WaitlistQueue, after: WaitlistQueue) -> None:
        gone = [e.guest_id for e in before.ordered() if e.guest_id not in after]
        if gone:
            await self.session.execute(
                delete(WaitlistEntry).where(
                    WaitlistEntry.pool_id == before.pool_id, WaitlistEntry.guest_id.in_(gone)
                )
            )
        for entry in after.ordered():
            if entry.guest_id not in before:
                self.session.add(
                    WaitlistEntry(
                        pool_id=entry.pool_id,
                        guest_id=entry.guest_id,
                        priority=entry.priority,
                        joined_at=entry.joined_at,
                        requested_seats=entry.requested_seats,
                    )
                )

    async def save_allocation(
        self, row: ResourcePool, before: WaitlistQueue, result: AllocationResult
    ) -> None:
        self.apply_pool(row, result.pool)
        await self.save_waitlist(before, result.waitlist)
        changed = list(result.promoted)
        if result.left is not None:
            changed.append(result.left)
        await self.save_guests(changed)


def apply_guest(row: Guest, guest: GuestDTO) -> None:
    row.status = guest.status
    row.allocated_seats = guest.allocated_seats
    row.confirmed_seats = guest.confirmed_seats
    row.is_on_waitlist = guest.is_on_waitlist
    row.waitlist_priority = guest.waitlist_priority


class InventoryWriteModel(ABC):
    @abstractmethod
    async def confirm_units(self, pool_id: UUID, units: int) -> Decision[Granted | Queued]:
        """Take units straight from the ledger, without any guest or waitlist."""
        raise NotImplementedError

    @abstractmethod
    async def release(self, pool_id: UUID, units: int) -> Decision[AllocationResult]:
        raise NotImplementedError

    @abstractmethod
    async def resize_block(self, pool_id: UUID, blocked: int) -> Decision[AllocationResult]:
        raise NotImplementedError

    @abstractmethod
    async def leave_waitlist(self, pool_id: UUID, guest_id: UUID) -> Decision[AllocationResult]:
        raise NotImplementedError


class SqlInventoryWriteModel(InventoryWriteModel):
    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        dispatcher: NotificationDispatcherBase | None = None,
        locks: ResourceLocks | None = None,
        policy: AllocationPolicy | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._dispatcher = dispatcher or get_notification_dispatcher()
        self._locks = locks or resource_locks
        self._policy = policy or settings.allocation_policy()

    async def confirm_units(self, pool_id: UUID, units: int) -> Decision[Granted | Queued]:
        async with self._locks.hold(ResourceLocks.pool(pool_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = PoolRows(session)
                row = await rows.pool(pool_id)
                before = ResourcePoolDTO.from_model(row)
                outcome = try_confirm(before, units)
                effects = ()
                if isinstance(outcome, Granted):
                    rows.apply_pool(row, outcome.pool)
                    effects = capacity_alerts(before, outcome.pool, self._policy)
                    await session.flush()
        logger.info(
            f"Pool {pool_id}: {type(outcome).__name__} {units} units, "
            f"{outcome.pool.available} available"
        )
        await self._dispatcher.dispatch(effects)
        return Decision.success(outcome, effects)

    async def _reallocate(self, pool_id: UUID, operation) -> Decision[AllocationResult]:
        async with self._locks.hold(ResourceLocks.pool(pool_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = PoolRows(session)
                row = await rows.pool(pool_id)
                waitlist = await rows.waitlist(pool_id)
                guests = await rows.guests(e.guest_id for e in waitlist.ordered())
                result = operation(ResourcePoolDTO.from_model(row), waitlist, guests)
                if not result.ok:
                    logger.warning(f"Pool {pool_id}: {result.error}")
                    return result
                await rows.save_allocation(row, waitlist, result.value)
                await session.flush()
        promoted = [str(g.uuid) for g in result.value.promoted]
        logger.info(f"Pool {pool_id}: promoted {promoted or 'nobody'} from the waitlist")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def release(self, pool_id: UUID, units: int) -> Decision[AllocationResult]:
        return await self._reallocate(
            pool_id,
            lambda pool, waitlist, guests: allocation.release(
                pool, units, waitlist, guests, self._policy
            ),
        )

    async def resize_block(self, pool_id: UUID, blocked: int) -> Decision[AllocationResult]:
        return await self._reallocate(
            pool_id,
            lambda pool, waitlist, guests: allocation.resize_block(
                pool, blocked, waitlist, guests, self._policy
            ),
        )

    async def leave_waitlist(self, pool_id: UUID, guest_id: UUID) -> Decision[AllocationResult]:
        async with self._locks.hold(ResourceLocks.pool(pool_id), ResourceLocks.guest(guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = PoolRows(session)
                row = await rows.pool(pool_id)
                guest = GuestDTO.from_model(await rows.guest(guest_id))
                waitlist = await rows.waitlist(pool_id)
                guests = await rows.guests(
                    e.guest_id for e in waitlist.ordered() if e.guest_id != guest_id
                )
                result = allocation.leave_waitlist(
                    ResourcePoolDTO.from_model(row), waitlist, guest, guests, self._policy
                )
                await rows.save_allocation(row, waitlist, result.value)
                await session.flush()
        logger.info(f"Guest {guest_id} left the waitlist of pool {pool_id}")
        await self._dispatcher.dispatch(result.effects)
        return result
