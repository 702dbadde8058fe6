from fastapi import APIRouter

from .features.get_itinerary.router import router as get_itinerary_router
from .features.register_session.router import router as register_session_router
from .features.switch_session.router import router as switch_session_router
from .features.unregister_session.router import router as unregister_session_router

router = APIRouter()

# the switch route must come before the "{session_id}" routes
router.include_router(switch_session_router)
router.include_router(register_session_router)
router.include_router(unregister_session_router)
router.include_router(get_itinerary_router)
