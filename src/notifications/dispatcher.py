import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import TypeAdapter

from src.events import DomainEvent

logger = logging.getLogger(__name__)


def event_payload(event: DomainEvent) -> dict[str, Any]:
    """JSON-ready representation of a side effect."""
    data = TypeAdapter(type(event)).dump_python(event, mode="json")
    return {"event_type": event.event_type, **data}


class NotificationDispatcherBase(ABC):
    """Consumes the side effects of a committed decision."""

    @abstractmethod
    async def dispatch(self, effects: Sequence[DomainEvent]) -> None:
        pass


class LoggingNotificationDispatcher(NotificationDispatcherBase):
    async def dispatch(self, effects: Sequence[DomainEvent]) -> None:
        for event in effects:
            logger.info(f"Notification {event.event_type}: {event_payload(event)}")


class WebhookNotificationDispatcher(NotificationDispatcherBase):
    """Posts every side effect to an HTTP endpoint (message bus bridge, agent app)."""

    def __init__(
        self,
        url: str,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 5.0,
    ):
        self._url = url
        self._http_client_class = http_client_class
        self._timeout = timeout

    async def dispatch(self, effects: Sequence[DomainEvent]) -> None:
        """Deliver each event on its own. The decision is already committed, so failures are only logged."""
        if not effects:
            return
        async with self._http_client_class(timeout=self._timeout) as client:
            for event in effects:
                payload = event_payload(event)
                try:
                    response = await client.post(self._url, json=payload)
                    response.raise_for_status()
                except httpx.HTTPError as e:
                    logger.error(f"Failed to deliver {event.event_type} to {self._url}: {e}")
                    continue
                logger.debug(f"Delivered {event.event_type} to {self._url}")
