from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.budget.dtos import AddonType, RequestStatus, RequestType


class GuestRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    guest_id: UUID
    request_type: RequestType
    status: RequestStatus
    perk_id: UUID | None = None
    addon_type: AddonType | None = None
    budget_consumed: int
    was_forwarded: bool
    notes: str | None = None
    created_at: datetime | None = None
