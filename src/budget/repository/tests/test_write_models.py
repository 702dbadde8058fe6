"""Tests for SqlRequestWriteModel and SqlBudgetReadModel."""

from uuid import uuid4

import pytest

from src.budget.dtos import PricingType, RequestStatus, RequestType, ReviewAction
from src.budget.repository.read_models import SqlBudgetReadModel
from src.budget.repository.write_models import SqlRequestWriteModel
from src.decisions import InvalidTransitionError
from src.events import RequestDecidedEvent
from src.models.errors import RecordNotFoundError
from src.models.tests.factories import add_event, add_guest, add_perk, add_tier, add_tier_perk
from src.notifications.tests.inmemory import InMemoryNotificationDispatcher


def make_write_model(db_session, locks, dispatcher=None):
    return SqlRequestWriteModel(
        session_overwrite=db_session,
        dispatcher=dispatcher or InMemoryNotificationDispatcher(),
        locks=locks,
    )


async def test_requests_are_approved_until_the_allowance_runs_out(db_session, locks):
    event = await add_event(db_session)
    tier = await add_tier(db_session, event, add_on_budget=5000)
    guest = await add_guest(db_session, event, tier)
    spa = await add_perk(db_session, event, unit_cost=3000)
    await add_tier_perk(db_session, tier, spa)
    write_model = make_write_model(db_session, locks)

    first = await write_model.create_request(guest.uuid, perk_id=spa.uuid)
    second = await write_model.create_request(guest.uuid, perk_id=spa.uuid)

    assert first.value.status == RequestStatus.APPROVED
    assert first.value.budget_consumed == 3000
    assert first.value.request_type == RequestType.PERK_REQUEST
    assert second.value.status == RequestStatus.PENDING


async def test_tier_price_overrides_perk_price(db_session, locks):
    event = await add_event(db_session)
    tier = await add_tier(db_session, event, add_on_budget=1000)
    guest = await add_guest(db_session, event, tier)
    dinner = await add_perk(db_session, event, name="Private dinner", unit_cost=4000)
    await add_tier_perk(db_session, tier, dinner, budget_consumed=800)

    result = await make_write_model(db_session, locks).create_request(guest.uuid, perk_id=dinner.uuid)

    assert result.value.budget_consumed == 800
    assert result.value.status == RequestStatus.APPROVED


async def test_included_perk_is_approved_without_spending(db_session, locks):
    event = await add_event(db_session)
    guest = await add_guest(db_session, event)
    breakfast = await add_perk(db_session, event, name="Breakfast", pricing_type=PricingType.INCLUDED, unit_cost=500)

    result = await make_write_model(db_session, locks).create_request(guest.uuid, perk_id=breakfast.uuid)

    assert result.value.status == RequestStatus.APPROVED
    assert result.value.budget_consumed == 0


async def test_review_forward_then_approve(db_session, locks):
    event = await add_event(db_session)
    guest = await add_guest(db_session, event)
    dispatcher = InMemoryNotificationDispatcher()
    write_model = make_write_model(db_session, locks, dispatcher)
    created = await write_model.create_request(guest.uuid, cost=2500, notes="Airport pickup at 3am")
    assert created.value.status == RequestStatus.PENDING

    forwarded = await write_model.review_request(created.value.uuid, ReviewAction.FORWARD_TO_CLIENT)
    again = await write_model.review_request(created.value.uuid, ReviewAction.FORWARD_TO_CLIENT)
    approved = await write_model.review_request(created.value.uuid, ReviewAction.APPROVE)

    assert forwarded.value.status == RequestStatus.FORWARDED_TO_CLIENT
    assert forwarded.value.was_forwarded is True
    assert isinstance(again.error, InvalidTransitionError)
    assert approved.value.status == RequestStatus.APPROVED
    assert approved.value.notes == "Airport pickup at 3am"
    assert [e.status for e in dispatcher.of_type(RequestDecidedEvent)] == [
        "pending",
        "forwarded_to_client",
        "approved",
    ]


async def test_review_unknown_request_raises_not_found(db_session, locks):
    with pytest.raises(RecordNotFoundError):
        await make_write_model(db_session, locks).review_request(uuid4(), ReviewAction.APPROVE)


async def test_bulk_approve_and_budget_summary(db_session, locks):
    event = await add_event(db_session)
    vip = await add_tier(db_session, event, name="VIP", add_on_budget=2000)
    friends = await add_tier(db_session, event, name="Friends", add_on_budget=500)
    asha = await add_guest(db_session, event, vip, name="Asha")
    kiran = await add_guest(db_session, event, vip, name="Kiran")
    await add_guest(db_session, event, friends, name="Ravi")
    write_model = make_write_model(db_session, locks)
    await write_model.create_request(asha.uuid, cost=1500)
    await write_model.create_request(kiran.uuid, cost=3000)
    rejected = await write_model.create_request(kiran.uuid, cost=2500)
    await write_model.review_request(rejected.value.uuid, ReviewAction.REJECT)

    result = await write_model.bulk_approve(event.uuid)

    assert result.value.approved_count == 1
    assert result.value.failed_count == 0
    summary = {
        s.tier_name: s
        for s in await SqlBudgetReadModel(session_overwrite=db_session).get_budget_summary(event.uuid)
    }
    assert summary["VIP"].guest_count == 2
    assert summary["VIP"].allocated == 4000
    assert summary["VIP"].used == 4500
    assert summary["VIP"].remaining == -500
    assert summary["Friends"].used == 0
