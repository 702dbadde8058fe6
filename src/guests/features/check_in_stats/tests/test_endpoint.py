from uuid import uuid4

from src.guests.dtos import GuestDTO, GuestStatus
from src.guests.features.check_in_stats.router import get_guest_read_model
from src.guests.tests.inmemory_models import InMemoryGuestReadModel
from src.guests.urls import CHECK_IN_STATS_URL


async def test_check_in_stats(client_factory):
    event_id = uuid4()
    guests = [
        GuestDTO(uuid=uuid4(), event_id=event_id, name="A", status=GuestStatus.ARRIVED, confirmed_seats=1),
        GuestDTO(uuid=uuid4(), event_id=event_id, name="B", status=GuestStatus.CONFIRMED, confirmed_seats=1),
        GuestDTO(uuid=uuid4(), event_id=event_id, name="C", status=GuestStatus.DECLINED),
        GuestDTO(uuid=uuid4(), event_id=uuid4(), name="Other event"),
    ]
    read_model = InMemoryGuestReadModel({g.uuid: g for g in guests})
    overrides = {get_guest_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.get(CHECK_IN_STATS_URL.format(event_id=event_id))

    assert response.status_code == 200
    assert response.json() == {
        "total": 3,
        "arrived": 1,
        "confirmed": 1,
        "pending": 0,
        "declined": 1,
        "no_show": 0,
        "not_arrived": 2,
    }
