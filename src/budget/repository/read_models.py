import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.budget.dtos import GuestRequestDTO, TierBudgetSummary
from src.budget.ledger import summarize_budget
from src.budget.repository.orm_models import GuestRequest
from src.config.database import async_session_manager
from src.guests.dtos import GuestDTO, TierDTO
from src.guests.repository.orm_models import Guest, Tier


class BudgetReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_budget_summary(self, event_id: UUID) -> list[TierBudgetSummary]:
        """Per-tier breakdown of allocated vs used add-on budget."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest_requests(self, guest_id: UUID) -> list[GuestRequestDTO]:
        raise NotImplementedError


class SqlBudgetReadModel(BudgetReadModel):
    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def get_budget_summary(self, event_id: UUID) -> list[TierBudgetSummary]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            tiers = (
                await session.execute(select(Tier).where(Tier.event_id == event_id).order_by(Tier.name))
            ).scalars().all()
            guests = (
                await session.execute(select(Guest).where(Guest.event_id == event_id))
            ).scalars().all()
            requests = (
                await session.execute(
                    select(GuestRequest)
                    .join(Guest, Guest.uuid == GuestRequest.guest_id)
                    .where(Guest.event_id == event_id)
                )
            ).scalars().all()

            return summarize_budget(
                [TierDTO.from_model(t) for t in tiers],
                [GuestDTO.from_model(g) for g in guests],
                [GuestRequestDTO.from_model(r) for r in requests],
            )

    async def get_guest_requests(self, guest_id: UUID) -> list[GuestRequestDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = (
                select(GuestRequest)
                .where(GuestRequest.guest_id == guest_id)
                .order_by(GuestRequest.created_at)
            )
            return [GuestRequestDTO.from_model(r) for r in (await session.execute(stmt)).scalars().all()]
