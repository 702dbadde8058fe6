"""Perk / add-on request write models.

The approval decision for a new request depends on what the guest already
spent, so requests of one guest are serialized with the guest lock.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.budget import approval
from src.budget.dtos import (
    AddonType,
    BulkApprovalReport,
    GuestRequestDTO,
    LabelPerkDTO,
    PerkDTO,
    RequestStatus,
    ReviewAction,
)
from src.budget.repository.orm_models import GuestRequest, Perk, TierPerk
from src.config.database import async_session_manager
from src.decisions import Decision
from src.guests.dtos import GuestDTO, TierDTO
from src.guests.repository.orm_models import Guest, Tier
from src.locks import ResourceLocks, resource_locks
from src.models.errors import RecordNotFoundError
from src.notifications import NotificationDispatcherBase, get_notification_dispatcher

logger = logging.getLogger(__name__)


class RequestWriteModel(ABC):
    @abstractmethod
    async def create_request(
        self,
        guest_id: UUID,
        perk_id: UUID | None = None,
        cost: int | None = None,
        addon_type: AddonType | None = None,
        notes: str | None = None,
    ) -> Decision[GuestRequestDTO]:
        raise NotImplementedError

    @abstractmethod
    async def review_request(
        self, request_id: UUID, action: ReviewAction, notes: str | None = None
    ) -> Decision[GuestRequestDTO]:
        raise NotImplementedError

    @abstractmethod
    async def bulk_approve(self, event_id: UUID) -> Decision[BulkApprovalReport]:
        """Approve every open (pending or forwarded) request of an event."""
        raise NotImplementedError


def apply_request(row: GuestRequest, request: GuestRequestDTO) -> None:
    row.status = request.status
    row.was_forwarded = request.was_forwarded
    row.notes = request.notes
    row.budget_consumed = request.budget_consumed


class SqlRequestWriteModel(RequestWriteModel):
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

    async def _guest_requests(self, session: AsyncSession, guest_id: UUID) -> list[GuestRequestDTO]:
        stmt = select(GuestRequest).where(GuestRequest.guest_id == guest_id)
        return [GuestRequestDTO.from_model(r) for r in (await session.execute(stmt)).scalars().all()]

    async def _offer(
        self, session: AsyncSession, guest: GuestDTO, perk_id: UUID | None
    ) -> tuple[TierDTO | None, PerkDTO | None, LabelPerkDTO | None]:
        tier_row = await session.get(Tier, guest.label_id) if guest.label_id else None
        tier = TierDTO.from_model(tier_row) if tier_row else None
        if perk_id is None:
            return tier, None, None

        perk_row = await session.get(Perk, perk_id)
        if perk_row is None:
            raise RecordNotFoundError("Perk", perk_id)
        label_perk = None
        if tier is not None:
            stmt = select(TierPerk).where(TierPerk.tier_id == tier.uuid, TierPerk.perk_id == perk_id)
            tier_perk = (await session.execute(stmt)).scalar_one_or_none()
            label_perk = LabelPerkDTO.from_model(tier_perk) if tier_perk else None
        return tier, PerkDTO.from_model(perk_row), label_perk

    async def create_request(
        self,
        guest_id: UUID,
        perk_id: UUID | None = None,
        cost: int | None = None,
        addon_type: AddonType | None = None,
        notes: str | None = None,
    ) -> Decision[GuestRequestDTO]:
        async with self._locks.hold(ResourceLocks.guest(guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                guest_row = await session.get(Guest, guest_id, with_for_update=True)
                if guest_row is None:
                    raise RecordNotFoundError("Guest", guest_id)
                guest = GuestDTO.from_model(guest_row)
                tier, perk, label_perk = await self._offer(session, guest, perk_id)

                result = approval.create_request(
                    guest,
                    tier=tier,
                    perk=perk,
                    label_perk=label_perk,
                    existing_requests=await self._guest_requests(session, guest_id),
                    cost=cost,
                    addon_type=addon_type,
                    notes=notes,
                    now=self._clock(),
                )
                if not result.ok:
                    logger.warning(f"Request of guest {guest_id} rejected: {result.error}")
                    return result

                request = result.value
                session.add(
                    GuestRequest(
                        uuid=request.uuid,
                        guest_id=request.guest_id,
                        perk_id=request.perk_id,
                        request_type=request.request_type,
                        addon_type=request.addon_type,
                        status=request.status,
                        budget_consumed=request.budget_consumed,
                        was_forwarded=request.was_forwarded,
                        notes=request.notes,
                        created_at=request.created_at,
                    )
                )
                await session.flush()

        logger.info(
            f"Request {request.uuid} of guest {guest_id} created as {request.status.value} "
            f"({request.budget_consumed} consumed)"
        )
        await self._dispatcher.dispatch(result.effects)
        return result

    async def review_request(
        self, request_id: UUID, action: ReviewAction, notes: str | None = None
    ) -> Decision[GuestRequestDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = select(GuestRequest.guest_id).where(GuestRequest.uuid == request_id)
            guest_id = (await session.execute(stmt)).scalar_one_or_none()
        if guest_id is None:
            raise RecordNotFoundError("Request", request_id)

        async with self._locks.hold(ResourceLocks.guest(guest_id)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                row = await session.get(GuestRequest, request_id, with_for_update=True)
                result = approval.review_request(GuestRequestDTO.from_model(row), action, notes)
                if not result.ok:
                    logger.warning(f"Review of request {request_id} rejected: {result.error}")
                    return result
                apply_request(row, result.value)
                await session.flush()

        logger.info(f"Request {request_id} {action.value}: now {result.value.status.value}")
        await self._dispatcher.dispatch(result.effects)
        return result

    async def bulk_approve(self, event_id: UUID) -> Decision[BulkApprovalReport]:
        open_statuses = [RequestStatus.PENDING, RequestStatus.FORWARDED_TO_CLIENT]
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = (
                select(GuestRequest.guest_id)
                .join(Guest, Guest.uuid == GuestRequest.guest_id)
                .where(Guest.event_id == event_id, GuestRequest.status.in_(open_statuses))
                .distinct()
            )
            guest_ids = list((await session.execute(stmt)).scalars().all())

        async with self._locks.hold(*(ResourceLocks.guest(g) for g in guest_ids)):
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                stmt = (
                    select(GuestRequest)
                    .join(Guest, Guest.uuid == GuestRequest.guest_id)
                    .where(Guest.event_id == event_id, GuestRequest.status.in_(open_statuses))
                    .order_by(GuestRequest.created_at)
                    .with_for_update()
                )
                rows = {r.uuid: r for r in (await session.execute(stmt)).scalars().all()}
                result = approval.bulk_approve(GuestRequestDTO.from_model(r) for r in rows.values())
                report = result.value
                for request in report.approved:
                    apply_request(rows[request.uuid], request)
                await session.flush()

        logger.info(
            f"Bulk approval for event {event_id}: {report.approved_count} approved, "
            f"{report.failed_count} failed"
        )
        await self._dispatcher.dispatch(result.effects)
        return result
