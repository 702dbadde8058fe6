import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.decisions import Decision
from src.guests.repository.orm_models import Guest
from src.itinerary import scheduler
from src.itinerary.dtos import (
    RegistrationOutcome,
    SessionDTO,
    SwitchOutcome,
    UnregistrationOutcome,
)
from src.itinerary.repository.orm_models import ItineraryRegistration, ItinerarySession
from src.locks import ResourceLocks, resource_locks
from src.models.errors import RecordNotFoundError
from src.notifications import NotificationDispatcherBase, get_notification_dispatcher

logger = logging.getLogger(__name__)


class ItineraryWriteModel(ABC):
    @abstractmethod
    async def register(self, guest_id: UUID, session_id: UUID) -> Decision[RegistrationOutcome]:
        raise NotImplementedError

    @abstractmethod
    async def unregister(self, guest_id: UUID, session_id: UUID) -> Decision[UnregistrationOutcome]:
        raise NotImplementedError

    @abstractmethod
    async def switch_session(
        self, guest_id: UUID, from_session_ids: list[UUID], to_session_id: UUID
    ) -> Decision[SwitchOutcome]:
        """Leave some sessions for another one. Sessions left stay left when joining fails."""
        raise NotImplementedError


class SqlItineraryWriteModel(ItineraryWriteModel):
    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        dispatcher: NotificationDispatcherBase | None = None,
        locks: ResourceLocks | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._session_overwrite = session_overwrite
        self._dispatcher = dispatcher or get_notification_dispatcher()
        self._locks = locks or resource_locks
        self._clock = clock or (lambda: datetime.now(UTC))

    async def _sessions(self, session: AsyncSession, session_ids: Iterable[UUID]) -> dict[UUID, ItinerarySession]:
        session_ids = list(session_ids)
        stmt = select(ItinerarySession).where(ItinerarySession.uuid.in_(session_ids)).with_for_update()
        rows = {row.uuid: row for row in (await session.execute(stmt)).scalars().all()}
        for session_id in session_ids:
            if session_id not in rows:
                raise RecordNotFoundError("Session", session_id)
        return rows

    async def _registered_sessions(self, session: AsyncSession, guest_id: UUID) -> list[SessionDTO]:
        if await session.get(Guest, guest_id) is None:
            raise RecordNotFoundError("Guest", guest_id)
        stmt = (
            select(ItinerarySession)
            .join(ItineraryRegistration, ItineraryRegistration.session_id == ItinerarySession.uuid)
            .where(ItineraryRegistration.guest_id == guest_id)
        )
        return [SessionDTO.from_model(s) for s in (await session.execute(stmt)).scalars().all()]

    async def _save_registration(
        self, session: AsyncSession, row: ItinerarySession, outcome: RegistrationOutcome
    ) -> None:
        if outcome.registration is None:
            return
        row.current_attendees = outcome.session.current_attendees
        session.add(
            ItineraryRegistration(
                guest_id=outcome.registration.guest_id,
                session_id=outcome.registration.session_id,
                registered_at=outcome.registration.registered_at,
            )
        )

    async def _save_unregistration(
        self,
        session: AsyncSession,
        guest_id: UUID,
        row: ItinerarySession,
        outcome: UnregistrationOutcome,
    ) -> None:
        if not outcome.removed:
            return
        row.current_attendees = outcome.session.current_attendees
        await session.execute(
            delete(ItineraryRegistration).where(
                ItineraryRegistration.guest_id == guest_id,
                ItineraryRegistration.session_id == row.uuid,
            )
        )

    async def register(self, guest_id: UUID, session_id: UUID) -> Decision[RegistrationOutcome]:
        async with self._locks.hold(ResourceLocks.guest(guest_id), ResourceLocks.session(session_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                row = (await self._sessions(session, [session_id]))[session_id]
                registered = await self._registered_sessions(session, guest_id)
                result = scheduler.register(
                    guest_id, SessionDTO.from_model(row), registered, self._clock()
                )
                if not result.ok:
                    logger.warning(f"Guest {guest_id} cannot join session {session_id}: {result.error}")
                    return result
                await self._save_registration(session, row, result.value)
                await session.flush()

        logger.info(f"Guest {guest_id} registered for session {session_id}")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def unregister(self, guest_id: UUID, session_id: UUID) -> Decision[UnregistrationOutcome]:
        async with self._locks.hold(ResourceLocks.guest(guest_id), ResourceLocks.session(session_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                row = (await self._sessions(session, [session_id]))[session_id]
                registered = await self._registered_sessions(session, guest_id)
                result = scheduler.unregister(guest_id, SessionDTO.from_model(row), registered)
                await self._save_unregistration(session, guest_id, row, result.value)
                await session.flush()

        if result.value.removed:
            logger.info(f"Guest {guest_id} left session {session_id}")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def switch_session(
        self, guest_id: UUID, from_session_ids: list[UUID], to_session_id: UUID
    ) -> Decision[SwitchOutcome]:
        session_ids = [*from_session_ids, to_session_id]
        keys = [ResourceLocks.guest(guest_id), *(ResourceLocks.session(s) for s in session_ids)]
        async with self._locks.hold(*keys):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                rows = await self._sessions(session, session_ids)
                registered = await self._registered_sessions(session, guest_id)
                result = scheduler.switch_session(
                    guest_id,
                    [SessionDTO.from_model(rows[s]) for s in from_session_ids],
                    SessionDTO.from_model(rows[to_session_id]),
                    registered,
                    self._clock(),
                )
                # sessions left are persisted even when joining failed
                for released in result.value.released:
                    await self._save_unregistration(
                        session, guest_id, rows[released.session.uuid], released
                    )
                if result.ok:
                    await self._save_registration(session, rows[to_session_id], result.value.registered)
                await session.flush()

        if result.ok:
            logger.info(f"Guest {guest_id} switched to session {to_session_id}")
        else:
            logger.warning(
                f"Guest {guest_id} left {len(result.value.released)} sessions "
                f"but cannot join {to_session_id}: {result.error}"
            )
        await self._dispatcher.dispatch(result.effects)
        return result
