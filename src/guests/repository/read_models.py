import abc
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import CheckInStatsDTO, GuestDTO, GuestStatus
from src.guests.repository.orm_models import Guest


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_guest(self, guest_id: UUID) -> GuestDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_check_in_stats(self, event_id: UUID) -> CheckInStatsDTO:
        """Counts of guests per status for the ground team's check-in desk."""
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    """SQL implementation of the guest read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None):
        self._session_overwrite = session_overwrite

    async def get_guest(self, guest_id: UUID) -> GuestDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            return GuestDTO.from_model(guest) if guest else None

    async def get_check_in_stats(self, event_id: UUID) -> CheckInStatsDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = (
                select(Guest.status, func.count())
                .where(Guest.event_id == event_id)
                .group_by(Guest.status)
            )
            counts = {GuestStatus(status): count for status, count in (await session.execute(stmt)).all()}

        return CheckInStatsDTO(
            total=sum(counts.values()),
            arrived=counts.get(GuestStatus.ARRIVED, 0),
            confirmed=counts.get(GuestStatus.CONFIRMED, 0),
            pending=counts.get(GuestStatus.PENDING, 0),
            declined=counts.get(GuestStatus.DECLINED, 0),
            no_show=counts.get(GuestStatus.NO_SHOW, 0),
        )
