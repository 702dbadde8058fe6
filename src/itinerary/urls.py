SESSION_REGISTRATION_URL = "/api/v1/guests/{guest_id}/sessions/{session_id}"
SWITCH_SESSION_URL = "/api/v1/guests/{guest_id}/sessions/switch"
ITINERARY_URL = "/api/v1/guests/{guest_id}/itinerary"
