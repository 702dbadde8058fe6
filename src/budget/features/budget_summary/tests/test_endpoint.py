from uuid import uuid4

from src.budget.dtos import GuestRequestDTO, RequestStatus, RequestType
from src.budget.features.budget_summary.router import get_budget_read_model
from src.budget.tests.inmemory_models import InMemoryBudgetReadModel
from src.budget.urls import BUDGET_SUMMARY_URL
from src.guests.dtos import GuestDTO, TierDTO


async def test_budget_summary_per_tier(client_factory):
    event_id = uuid4()
    vip = TierDTO(uuid=uuid4(), event_id=event_id, name="VIP", add_on_budget=2000)
    friends = TierDTO(uuid=uuid4(), event_id=event_id, name="Friends", add_on_budget=500)
    guests = [
        GuestDTO(uuid=uuid4(), event_id=event_id, name="Asha", label_id=vip.uuid),
        GuestDTO(uuid=uuid4(), event_id=event_id, name="Ravi", label_id=vip.uuid),
        GuestDTO(uuid=uuid4(), event_id=event_id, name="Meera", label_id=friends.uuid),
    ]
    requests = [
        GuestRequestDTO(
            uuid=uuid4(),
            guest_id=guests[0].uuid,
            request_type=RequestType.CUSTOM,
            status=RequestStatus.APPROVED,
            budget_consumed=4500,
        ),
        GuestRequestDTO(
            uuid=uuid4(),
            guest_id=guests[2].uuid,
            request_type=RequestType.CUSTOM,
            status=RequestStatus.PENDING,
            budget_consumed=300,
        ),
    ]
    read_model = InMemoryBudgetReadModel([vip, friends], guests, requests)
    overrides = {get_budget_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.get(BUDGET_SUMMARY_URL.format(event_id=event_id))

    assert response.status_code == 200
    vip_summary, friends_summary = response.json()
    assert vip_summary["guest_count"] == 2
    assert vip_summary["allocated"] == 4000
    assert vip_summary["used"] == 4500
    assert vip_summary["remaining"] == -500
    assert friends_summary["used"] == 0
    assert friends_summary["remaining"] == 500
