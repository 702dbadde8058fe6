from fastapi import APIRouter

from .features.check_in.router import router as check_in_router
from .features.check_in_stats.router import router as check_in_stats_router
from .features.mark_no_show.router import router as mark_no_show_router
from .features.register_guest.router import router as register_guest_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(submit_rsvp_router)
router.include_router(check_in_router)
router.include_router(mark_no_show_router)
router.include_router(register_guest_router)
router.include_router(check_in_stats_router)
