from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guests.repository.read_models import GuestReadModel, SqlGuestReadModel
from src.guests.urls import CHECK_IN_STATS_URL

router = APIRouter()


class CheckInStatsResponse(BaseModel):
    total: int
    arrived: int
    confirmed: int
    pending: int
    declined: int
    no_show: int
    not_arrived: int


def get_guest_read_model() -> GuestReadModel:
    """Dependency to get guest read model instance."""
    return SqlGuestReadModel()


@router.get(CHECK_IN_STATS_URL, response_model=CheckInStatsResponse)
async def get_check_in_stats(
    event_id: UUID,
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> CheckInStatsResponse:
    stats = await read_model.get_check_in_stats(event_id)
    return CheckInStatsResponse(
        total=stats.total,
        arrived=stats.arrived,
        confirmed=stats.confirmed,
        pending=stats.pending,
        declined=stats.declined,
        no_show=stats.no_show,
        not_arrived=stats.not_arrived,
    )
