from uuid import uuid4

from src.itinerary.features.register_session.router import get_itinerary_write_model
from src.itinerary.tests.inmemory_models import InMemoryItinerary, InMemoryItineraryWriteModel
from src.itinerary.tests.sessions import make_session
from src.itinerary.urls import SESSION_REGISTRATION_URL


async def test_register_for_session(client_factory):
    event_id, guest_id = uuid4(), uuid4()
    tour = make_session(event_id, "City tour", 10, 12, capacity=20)
    itinerary = InMemoryItinerary([tour], [guest_id])
    overrides = {get_itinerary_write_model: lambda: InMemoryItineraryWriteModel(itinerary)}

    async with client_factory(overrides) as client:
        response = await client.post(SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=tour.uuid))

    assert response.status_code == 201
    data = response.json()
    assert data["implicit"] is False
    assert data["session"]["current_attendees"] == 1
    assert (guest_id, tour.uuid) in itinerary.registrations


async def test_overlapping_session_lists_conflicts(client_factory):
    event_id, guest_id = uuid4(), uuid4()
    workshop = make_session(event_id, "Cooking workshop", 10, 12)
    tour = make_session(event_id, "City tour", 11, 13)
    itinerary = InMemoryItinerary([workshop, tour], [guest_id])
    overrides = {get_itinerary_write_model: lambda: InMemoryItineraryWriteModel(itinerary)}

    async with client_factory(overrides) as client:
        await client.post(SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=workshop.uuid))
        response = await client.post(SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=tour.uuid))

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "conflict"
    assert detail["conflicts"] == [{"uuid": str(workshop.uuid), "title": "Cooking workshop"}]
    assert itinerary.sessions[tour.uuid].current_attendees == 0


async def test_full_session_is_rejected(client_factory):
    event_id, guest_id = uuid4(), uuid4()
    tour = make_session(event_id, "City tour", 10, 12, capacity=1, current_attendees=1)
    itinerary = InMemoryItinerary([tour], [guest_id])
    overrides = {get_itinerary_write_model: lambda: InMemoryItineraryWriteModel(itinerary)}

    async with client_factory(overrides) as client:
        response = await client.post(SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=tour.uuid))

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "full"


async def test_mandatory_session_is_implicit(client_factory):
    event_id, guest_id = uuid4(), uuid4()
    gala = make_session(event_id, "Gala dinner", 19, 23, is_mandatory=True)
    itinerary = InMemoryItinerary([gala], [guest_id])
    overrides = {get_itinerary_write_model: lambda: InMemoryItineraryWriteModel(itinerary)}

    async with client_factory(overrides) as client:
        response = await client.post(SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=gala.uuid))

    assert response.status_code == 201
    assert response.json()["implicit"] is True
    assert itinerary.registrations == set()


async def test_unknown_session_is_not_found(client_factory):
    guest_id = uuid4()
    itinerary = InMemoryItinerary([], [guest_id])
    overrides = {get_itinerary_write_model: lambda: InMemoryItineraryWriteModel(itinerary)}

    async with client_factory(overrides) as client:
        response = await client.post(SESSION_REGISTRATION_URL.format(guest_id=guest_id, session_id=uuid4()))

    assert response.status_code == 404
