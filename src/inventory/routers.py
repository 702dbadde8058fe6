from fastapi import APIRouter

from .features.inventory_status.router import router as inventory_status_router
from .features.leave_waitlist.router import router as leave_waitlist_router
from .features.release_units.router import router as release_units_router
from .features.resize_block.router import router as resize_block_router

router = APIRouter()

router.include_router(inventory_status_router)
router.include_router(release_units_router)
router.include_router(resize_block_router)
router.include_router(leave_waitlist_router)
