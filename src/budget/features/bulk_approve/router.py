from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.budget.repository.write_models import RequestWriteModel, SqlRequestWriteModel
from src.budget.urls import BULK_APPROVE_URL

router = APIRouter()


class BulkApprovalResponse(BaseModel):
    approved: int
    failed: int
    approved_ids: list[UUID]
    errors: dict[UUID, str]


def get_request_write_model() -> RequestWriteModel:
    return SqlRequestWriteModel()


@router.post(BULK_APPROVE_URL, response_model=BulkApprovalResponse)
async def approve_all(
    event_id: UUID,
    write_model: RequestWriteModel = Depends(get_request_write_model),
) -> BulkApprovalResponse:
    """Approve every open request of the event, reporting the ones that could not be."""
    report = (await write_model.bulk_approve(event_id)).value
    return BulkApprovalResponse(
        approved=report.approved_count,
        failed=report.failed_count,
        approved_ids=[r.uuid for r in report.approved],
        errors=report.failed,
    )
