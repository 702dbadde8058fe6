import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.repository.orm_models import Guest
from src.itinerary.dtos import ItineraryItem, SessionDTO
from src.itinerary.repository.orm_models import ItineraryRegistration, ItinerarySession
from src.itinerary.scheduler import build_itinerary


class ItineraryReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_itinerary(self, guest_id: UUID) -> list[ItineraryItem] | None:
        """The event programme as one guest sees it, or None for an unknown guest."""
        raise NotImplementedError


class SqlItineraryReadModel(ItineraryReadModel):
    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def get_itinerary(self, guest_id: UUID) -> list[ItineraryItem] | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None:
                return None

            sessions = (
                await session.execute(
                    select(ItinerarySession).where(ItinerarySession.event_id == guest.event_id)
                )
            ).scalars().all()
            registered_ids = set(
                (
                    await session.execute(
                        select(ItineraryRegistration.session_id).where(
                            ItineraryRegistration.guest_id == guest_id
                        )
                    )
                ).scalars().all()
            )

        return build_itinerary([SessionDTO.from_model(s) for s in sessions], registered_ids)
