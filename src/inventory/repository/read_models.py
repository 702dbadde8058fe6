import abc
from dataclasses import replace
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.settings import settings
from src.inventory.dtos import PoolUtilization, ResourcePoolDTO
from src.inventory.ledger import utilization
from src.inventory.repository.orm_models import ResourcePool, WaitlistEntry
from src.policy import AllocationPolicy


class InventoryReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_inventory_status(self, event_id: UUID) -> list[PoolUtilization]:
        """Utilization and early-warning status of every pool of an event, primary first."""
        raise NotImplementedError


class SqlInventoryReadModel(InventoryReadModel):
    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        policy: AllocationPolicy | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._policy = policy or settings.allocation_policy()

    async def get_inventory_status(self, event_id: UUID) -> list[PoolUtilization]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            pools_stmt = (
                select(ResourcePool)
                .where(ResourcePool.event_id == event_id)
                .order_by(ResourcePool.is_primary.desc(), ResourcePool.name)
            )
            pools = (await session.execute(pools_stmt)).scalars().all()

            queued_stmt = (
                select(WaitlistEntry.pool_id, func.count())
                .join(ResourcePool, ResourcePool.uuid == WaitlistEntry.pool_id)
                .where(ResourcePool.event_id == event_id)
                .group_by(WaitlistEntry.pool_id)
            )
            queued = dict((await session.execute(queued_stmt)).all())

        return [
            replace(
                utilization(ResourcePoolDTO.from_model(pool), self._policy),
                waitlisted=queued.get(pool.uuid, 0),
            )
            for pool in pools
        ]
