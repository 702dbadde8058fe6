from fastapi import APIRouter

from .features.budget_summary.router import router as budget_summary_router
from .features.bulk_approve.router import router as bulk_approve_router
from .features.create_request.router import router as create_request_router
from .features.review_request.router import router as review_request_router

router = APIRouter()

router.include_router(create_request_router)
router.include_router(review_request_router)
router.include_router(bulk_approve_router)
router.include_router(budget_summary_router)
