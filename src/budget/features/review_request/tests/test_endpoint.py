from uuid import uuid4

from src.budget.dtos import GuestRequestDTO, RequestStatus, RequestType
from src.budget.features.review_request.router import get_request_write_model
from src.budget.tests.inmemory_models import InMemoryRequestWriteModel
from src.budget.urls import REVIEW_REQUEST_URL


def pending_request() -> tuple[InMemoryRequestWriteModel, GuestRequestDTO]:
    request = GuestRequestDTO(uuid=uuid4(), guest_id=uuid4(), request_type=RequestType.CUSTOM, budget_consumed=2000)
    return InMemoryRequestWriteModel({}, requests={request.uuid: request}), request


async def test_forward_then_approve(client_factory):
    write_model, request = pending_request()
    overrides = {get_request_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        url = REVIEW_REQUEST_URL.format(request_id=request.uuid)
        forwarded = await client.post(url, json={"action": "forward_to_client", "notes": "Client to decide"})
        approved = await client.post(url, json={"action": "approve"})

    assert forwarded.status_code == 200
    assert forwarded.json()["status"] == RequestStatus.FORWARDED_TO_CLIENT.value
    assert forwarded.json()["was_forwarded"] is True
    assert approved.status_code == 200
    assert approved.json()["status"] == RequestStatus.APPROVED.value
    assert approved.json()["notes"] == "Client to decide"


async def test_forward_only_once(client_factory):
    write_model, request = pending_request()
    overrides = {get_request_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        url = REVIEW_REQUEST_URL.format(request_id=request.uuid)
        await client.post(url, json={"action": "forward_to_client"})
        response = await client.post(url, json={"action": "forward_to_client"})

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "invalid_transition"


async def test_rejected_request_is_final(client_factory):
    write_model, request = pending_request()
    overrides = {get_request_write_model: lambda: write_model}

    async with client_factory(overrides) as client:
        url = REVIEW_REQUEST_URL.format(request_id=request.uuid)
        await client.post(url, json={"action": "reject"})
        response = await client.post(url, json={"action": "approve"})

    assert response.status_code == 409
    assert write_model.requests[request.uuid].status == RequestStatus.REJECTED


async def test_unknown_request_is_not_found(client_factory):
    overrides = {get_request_write_model: lambda: InMemoryRequestWriteModel({})}

    async with client_factory(overrides) as client:
        response = await client.post(REVIEW_REQUEST_URL.format(request_id=uuid4()), json={"action": "approve"})

    assert response.status_code == 404
