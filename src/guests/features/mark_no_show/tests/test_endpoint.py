from uuid import uuid4

from src.guests.dtos import GuestDTO, GuestStatus, RSVPDecision, TierDTO
from src.guests.features.mark_no_show.router import get_guest_write_model
from src.guests.tests.inmemory_models import InMemoryGuestWriteModel
from src.guests.urls import NO_SHOW_URL
from src.inventory.dtos import ResourcePoolDTO


async def test_no_show_promotes_waiting_guest(client_factory):
    event_id = uuid4()
    tier = TierDTO(uuid=uuid4(), event_id=event_id, name="Friends")
    leaving = GuestDTO(
        uuid=uuid4(), event_id=event_id, name="Leaving", label_id=tier.uuid,
        status=GuestStatus.CONFIRMED, confirmed_seats=1,
    )
    waiting = GuestDTO(uuid=uuid4(), event_id=event_id, name="Waiting", label_id=tier.uuid)
    pool = ResourcePoolDTO(uuid=uuid4(), event_id=event_id, name="Taj Palace", blocked=1, confirmed=1)
    write_model = InMemoryGuestWriteModel(
        {leaving.uuid: leaving, waiting.uuid: waiting}, {tier.uuid: tier}, pool
    )
    await write_model.submit_rsvp(waiting.uuid, RSVPDecision.CONFIRMED)
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(NO_SHOW_URL.format(guest_id=leaving.uuid))

    assert response.status_code == 200
    data = response.json()
    assert data["guest"]["status"] == GuestStatus.NO_SHOW.value
    assert data["promoted_guest_ids"] == [str(waiting.uuid)]
    assert write_model.guests[waiting.uuid].status == GuestStatus.CONFIRMED


async def test_no_show_twice_is_accepted(client_factory):
    guest = GuestDTO(uuid=uuid4(), event_id=uuid4(), name="Asha Rao", status=GuestStatus.NO_SHOW)
    write_model = InMemoryGuestWriteModel({guest.uuid: guest})
    overrides = {get_guest_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.post(NO_SHOW_URL.format(guest_id=guest.uuid))

    assert response.status_code == 200
    assert response.json()["promoted_guest_ids"] == []
