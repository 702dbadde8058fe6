"""Every ORM model of the service, so ``BaseModel.metadata`` holds all tables.

Import this module (not ``src.models``) wherever the full schema is needed:
alembic autogenerate, the test database setup, the CLI seed command.
"""

from src.budget.repository.orm_models import GuestRequest, Perk, TierPerk
from src.guests.repository.orm_models import Guest, Tier
from src.inventory.repository.orm_models import ResourcePool, WaitlistEntry
from src.itinerary.repository.orm_models import ItineraryRegistration, ItinerarySession
from src.models.base import BaseModel
from src.models.event import Event

metadata = BaseModel.metadata

__all__ = [
    "metadata",
    "Event",
    "Tier",
    "Guest",
    "Perk",
    "TierPerk",
    "GuestRequest",
    "ResourcePool",
    "WaitlistEntry",
    "ItinerarySession",
    "ItineraryRegistration",
]
