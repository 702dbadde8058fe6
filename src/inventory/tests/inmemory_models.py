from uuid import UUID

from src.decisions import Decision
from src.guests.dtos import GuestDTO
from src.inventory import allocation
from src.inventory.dtos import AllocationResult, Granted, PoolUtilization, Queued, ResourcePoolDTO
from src.inventory.ledger import try_confirm, utilization
from src.inventory.repository.read_models import InventoryReadModel
from src.inventory.repository.write_models import InventoryWriteModel
from src.inventory.waitlist import WaitlistQueue
from src.models.errors import RecordNotFoundError


class InMemoryInventoryWriteModel(InventoryWriteModel):
    def __init__(
        self,
        pools: dict[UUID, ResourcePoolDTO],
        waitlists: dict[UUID, WaitlistQueue] | None = None,
        guests: dict[UUID, GuestDTO] | None = None,
    ):
        self.pools = pools
        self.waitlists = waitlists or {}
        self.guests = guests or {}

    def _pool(self, pool_id: UUID) -> ResourcePoolDTO:
        if pool_id not in self.pools:
            raise RecordNotFoundError("Resource pool", pool_id)
        return self.pools[pool_id]

    def _waitlist(self, pool_id: UUID) -> WaitlistQueue:
        return self.waitlists.get(pool_id, WaitlistQueue(pool_id=pool_id))

    def _store(self, result: Decision[AllocationResult]) -> Decision[AllocationResult]:
        if result.ok:
            value = result.value
            self.pools[value.pool.uuid] = value.pool
            self.waitlists[value.pool.uuid] = value.waitlist
            for guest in (*value.promoted, *([value.left] if value.left else [])):
                self.guests[guest.uuid] = guest
        return result

    async def confirm_units(self, pool_id: UUID, units: int) -> Decision[Granted | Queued]:
        outcome = try_confirm(self._pool(pool_id), units)
        self.pools[pool_id] = outcome.pool
        return Decision.success(outcome)

    async def release(self, pool_id: UUID, units: int) -> Decision[AllocationResult]:
        return self._store(
            allocation.release(self._pool(pool_id), units, self._waitlist(pool_id), self.guests)
        )

    async def resize_block(self, pool_id: UUID, blocked: int) -> Decision[AllocationResult]:
        return self._store(
            allocation.resize_block(self._pool(pool_id), blocked, self._waitlist(pool_id), self.guests)
        )

    async def leave_waitlist(self, pool_id: UUID, guest_id: UUID) -> Decision[AllocationResult]:
        if guest_id not in self.guests:
            raise RecordNotFoundError("Guest", guest_id)
        return self._store(
            allocation.leave_waitlist(
                self._pool(pool_id), self._waitlist(pool_id), self.guests[guest_id], self.guests
            )
        )


class InMemoryInventoryReadModel(InventoryReadModel):
    def __init__(self, pools: list[ResourcePoolDTO]):
        self.pools = pools

    async def get_inventory_status(self, event_id: UUID) -> list[PoolUtilization]:
        return [utilization(p) for p in self.pools if p.event_id == event_id]
