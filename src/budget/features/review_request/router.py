from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.budget.dtos import ReviewAction
from src.budget.features.schemas import GuestRequestResponse
from src.budget.repository.write_models import RequestWriteModel, SqlRequestWriteModel
from src.budget.urls import REVIEW_REQUEST_URL
from src.routers.errors import raise_for_decision

router = APIRouter()


class RequestReview(BaseModel):
    action: ReviewAction
    notes: str | None = None


def get_request_write_model() -> RequestWriteModel:
    return SqlRequestWriteModel()


@router.post(REVIEW_REQUEST_URL, response_model=GuestRequestResponse)
async def review_request(
    request_id: UUID,
    review: RequestReview,
    write_model: RequestWriteModel = Depends(get_request_write_model),
) -> GuestRequestResponse:
    """Approve, reject or forward a request to the client (forwarding happens once)."""
    try:
        result = await write_model.review_request(request_id, review.action, review.notes)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    raise_for_decision(result)
    return GuestRequestResponse.model_validate(result.value)
