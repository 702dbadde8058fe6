from datetime import UTC, datetime
from uuid import uuid4

from src.guests.dtos import GuestDTO
from src.inventory.dtos import ResourcePoolDTO, WaitlistEntryDTO
from src.inventory.features.leave_waitlist.router import get_inventory_write_model
from src.inventory.tests.inmemory_models import InMemoryInventoryWriteModel
from src.inventory.urls import LEAVE_WAITLIST_URL
from src.inventory.waitlist import WaitlistQueue


async def test_leave_waitlist(client_factory):
    event_id = uuid4()
    pool = ResourcePoolDTO(uuid=uuid4(), event_id=event_id, name="Taj Palace", blocked=1, confirmed=1)
    guest = GuestDTO(uuid=uuid4(), event_id=event_id, name="Waiting", is_on_waitlist=True, waitlist_priority=3)
    waitlist = WaitlistQueue(pool_id=pool.uuid).join(
        WaitlistEntryDTO(priority=3, joined_at=datetime.now(UTC), guest_id=guest.uuid, pool_id=pool.uuid)
    )
    write_model = InMemoryInventoryWriteModel({pool.uuid: pool}, {pool.uuid: waitlist}, {guest.uuid: guest})
    overrides = {get_inventory_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        response = await client.delete(LEAVE_WAITLIST_URL.format(pool_id=pool.uuid, guest_id=guest.uuid))

    assert response.status_code == 200
    assert response.json()["waitlisted"] == 0
    assert write_model.guests[guest.uuid].is_on_waitlist is False
