from uuid import uuid4

import pytest

from src.guests.dtos import GuestDTO, GuestStatus, TierDTO
from src.guests.features.submit_rsvp.router import get_guest_write_model
from src.guests.tests.inmemory_models import InMemoryGuestWriteModel
from src.guests.urls import SUBMIT_RSVP_URL
from src.inventory.dtos import ResourcePoolDTO

EVENT_ID = uuid4()


@pytest.fixture
def tier():
    return TierDTO(uuid=uuid4(), event_id=EVENT_ID, name="Friends", add_on_budget=5000)


def make_write_model(tier, *guests, blocked=10, confirmed=0):
    pool = ResourcePoolDTO(
        uuid=uuid4(), event_id=EVENT_ID, name="Taj Palace", is_primary=True,
        blocked=blocked, confirmed=confirmed,
    )
    return InMemoryGuestWriteModel({g.uuid: g for g in guests}, {tier.uuid: tier}, pool)


async def test_confirm_rsvp(client_factory, tier):
    guest = GuestDTO(uuid=uuid4(), event_id=EVENT_ID, name="Asha Rao", label_id=tier.uuid, allocated_seats=2)
    write_model = make_write_model(tier, guest)
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            SUBMIT_RSVP_URL.format(guest_id=guest.uuid), json={"decision": "confirmed", "seats": 2}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["guest"]["status"] == GuestStatus.CONFIRMED.value
    assert data["guest"]["confirmed_seats"] == 2
    assert data["waitlist_position"] is None
    assert write_model.pool.confirmed == 2


async def test_confirm_on_full_block_returns_waitlist_position(client_factory, tier):
    guest = GuestDTO(uuid=uuid4(), event_id=EVENT_ID, name="Asha Rao", label_id=tier.uuid)
    write_model = make_write_model(tier, guest, blocked=1, confirmed=1)
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            SUBMIT_RSVP_URL.format(guest_id=guest.uuid), json={"decision": "confirmed"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["guest"]["status"] == GuestStatus.PENDING.value
    assert data["guest"]["is_on_waitlist"] is True
    assert data["waitlist_position"] == 1


async def test_too_many_seats_is_unprocessable(client_factory, tier):
    guest = GuestDTO(uuid=uuid4(), event_id=EVENT_ID, name="Asha Rao", label_id=tier.uuid)
    write_model = make_write_model(tier, guest)
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            SUBMIT_RSVP_URL.format(guest_id=guest.uuid), json={"decision": "confirmed", "seats": 4}
        )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "invalid_seat_count"


async def test_rsvp_twice_is_a_conflict(client_factory, tier):
    guest = GuestDTO(uuid=uuid4(), event_id=EVENT_ID, name="Asha Rao", status=GuestStatus.DECLINED)
    write_model = make_write_model(tier, guest)
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            SUBMIT_RSVP_URL.format(guest_id=guest.uuid), json={"decision": "confirmed"}
        )

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "invalid_transition"


async def test_unknown_guest_is_not_found(client_factory, tier):
    write_model = make_write_model(tier)
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(
            SUBMIT_RSVP_URL.format(guest_id=uuid4()), json={"decision": "declined"}
        )

    assert response.status_code == 404
