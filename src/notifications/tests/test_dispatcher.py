import json
import logging
from uuid import uuid4

import httpx
import pytest

from src.events import GuestArrivedEvent, GuestConfirmedEvent, WaitlistPromotedEvent
from src.notifications.dispatcher import (
    LoggingNotificationDispatcher,
    WebhookNotificationDispatcher,
    event_payload,
)

WEBHOOK_URL = "https://hooks.example.com/events"


class RecordingTransport:
    """Collects the posted payloads and answers with a fixed status code."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.payloads = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.payloads.append(json.loads(request.content))
        return httpx.Response(self.status_code)

    def client_class(self) -> type[httpx.AsyncClient]:
        transport = httpx.MockTransport(self.handler)

        class MockClient(httpx.AsyncClient):
            def __init__(self, **kwargs):
                super().__init__(transport=transport, **kwargs)

        return MockClient


def test_event_payload_is_json_ready():
    guest_id, pool_id = uuid4(), uuid4()
    payload = event_payload(WaitlistPromotedEvent(guest_id=guest_id, pool_id=pool_id, seats=2))

    assert payload["event_type"] == "guest.waitlist_promoted"
    assert payload["guest_id"] == str(guest_id)
    assert payload["pool_id"] == str(pool_id)
    assert payload["seats"] == 2
    assert isinstance(payload["timestamp"], str)


@pytest.mark.asyncio
async def test_logging_dispatcher_logs_each_event(caplog):
    guest_id = uuid4()

    with caplog.at_level(logging.INFO, logger="src.notifications.dispatcher"):
        await LoggingNotificationDispatcher().dispatch([GuestArrivedEvent(guest_id=guest_id)])

    assert "guest.arrived" in caplog.text
    assert str(guest_id) in caplog.text


@pytest.mark.asyncio
async def test_webhook_dispatcher_posts_every_event():
    transport = RecordingTransport()
    dispatcher = WebhookNotificationDispatcher(WEBHOOK_URL, http_client_class=transport.client_class())
    first, second = uuid4(), uuid4()

    await dispatcher.dispatch([GuestArrivedEvent(guest_id=first), GuestArrivedEvent(guest_id=second)])

    assert [p["guest_id"] for p in transport.payloads] == [str(first), str(second)]
    assert all(p["event_type"] == "guest.arrived" for p in transport.payloads)


@pytest.mark.asyncio
async def test_webhook_dispatcher_skips_empty_effects():
    transport = RecordingTransport()
    dispatcher = WebhookNotificationDispatcher(WEBHOOK_URL, http_client_class=transport.client_class())

    await dispatcher.dispatch([])

    assert transport.payloads == []


@pytest.mark.asyncio
async def test_webhook_dispatcher_keeps_delivering_after_a_failure(caplog):
    transport = RecordingTransport(status_code=500)
    dispatcher = WebhookNotificationDispatcher(WEBHOOK_URL, http_client_class=transport.client_class())
    guest_id = uuid4()

    with caplog.at_level(logging.ERROR, logger="src.notifications.dispatcher"):
        await dispatcher.dispatch([GuestConfirmedEvent(guest_id=guest_id, seats=2), GuestArrivedEvent(guest_id=guest_id)])

    assert [p["event_type"] for p in transport.payloads] == ["guest.confirmed", "guest.arrived"]
    assert "Failed to deliver guest.confirmed" in caplog.text
    assert "Failed to deliver guest.arrived" in caplog.text
