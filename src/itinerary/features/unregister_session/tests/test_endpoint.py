from uuid import uuid4

from src.itinerary.features.unregister_session.router import get_itinerary_write_model
from src.itinerary.tests.inmemory_models import InMemoryItinerary, InMemoryItineraryWriteModel
from src.itinerary.tests.sessions import make_session
from src.itinerary.urls import SESSION_REGISTRATION_URL


async def test_unregister_twice_is_harmless(client_factory):
    event_id, guest_id = uuid4(), uuid4()
    tour = make_session(event_id, "City tour", 10, 12, current_attendees=1)
    itinerary = InMemoryItinerary([tour], [guest_id])
    itinerary.registrations.add((guest_id, tour.uuid))
    overrides = {get_itinerary_write_model: lambda: InMemoryItineraryWriteModel(itinerary)}

    async with client_factory(overrides) as client:
        url = SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=tour.uuid)
        first = await client.delete(url)
        second = await client.delete(url)

    assert first.status_code == 200
    assert first.json()["removed"] is True
    assert first.json()["session"]["current_attendees"] == 0
    assert second.status_code == 200
    assert second.json()["removed"] is False
    assert itinerary.sessions[tour.uuid].current_attendees == 0
