"""Rows for write and read model tests. Every helper flushes so the row gets its UUID."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.budget.dtos import PricingType
from src.budget.repository.orm_models import Perk, TierPerk
from src.guests.dtos import GuestStatus
from src.guests.repository.orm_models import Guest, Tier
from src.inventory.repository.orm_models import ResourcePool
from src.itinerary.repository.orm_models import ItinerarySession
from src.models.event import Event


async def add_event(session: AsyncSession, **kwargs) -> Event:
    defaults = dict(
        name="Rao-Shah Wedding",
        date=datetime(2026, 12, 12, tzinfo=UTC),
        location="Udaipur",
        timezone="Asia/Kolkata",
        event_code=f"EVT-{uuid4().hex[:8]}",
    )
    return await _add(session, Event(**{**defaults, **kwargs}))


async def add_tier(session: AsyncSession, event: Event, name="Friends", **kwargs) -> Tier:
    return await _add(session, Tier(event_id=event.uuid, name=name, **{"add_on_budget": 0, **kwargs}))


async def add_pool(session: AsyncSession, event: Event, blocked=10, confirmed=0, **kwargs) -> ResourcePool:
    defaults = dict(name="Taj Lake Palace", is_primary=True)
    return await _add(
        session,
        ResourcePool(event_id=event.uuid, blocked=blocked, confirmed=confirmed, **{**defaults, **kwargs}),
    )


async def add_guest(
    session: AsyncSession,
    event: Event,
    tier: Tier | None = None,
    status: GuestStatus = GuestStatus.PENDING,
    **kwargs,
) -> Guest:
    defaults = dict(name="Asha Rao", allocated_seats=1, confirmed_seats=0)
    return await _add(
        session,
        Guest(
            event_id=event.uuid,
            label_id=tier.uuid if tier else None,
            status=status,
            **{**defaults, **kwargs},
        ),
    )


async def add_perk(
    session: AsyncSession,
    event: Event,
    unit_cost=0,
    pricing_type: PricingType = PricingType.REQUESTABLE,
    **kwargs,
) -> Perk:
    defaults = dict(name="Spa session")
    return await _add(
        session,
        Perk(event_id=event.uuid, unit_cost=unit_cost, pricing_type=pricing_type, **{**defaults, **kwargs}),
    )


async def add_tier_perk(session: AsyncSession, tier: Tier, perk: Perk, **kwargs) -> TierPerk:
    return await _add(session, TierPerk(tier_id=tier.uuid, perk_id=perk.uuid, **kwargs))


async def add_session(
    session: AsyncSession, event: Event, start: datetime, end: datetime, **kwargs
) -> ItinerarySession:
    defaults = dict(title="City tour", is_mandatory=False, current_attendees=0)
    return await _add(
        session,
        ItinerarySession(event_id=event.uuid, start_time=start, end_time=end, **{**defaults, **kwargs}),
    )


async def _add(session: AsyncSession, row):
    session.add(row)
    await session.flush()
    return row
