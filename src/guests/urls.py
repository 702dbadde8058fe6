SUBMIT_RSVP_URL = "/api/v1/guests/{guest_id}/rsvp"
CHECK_IN_URL = "/api/v1/guests/{guest_id}/check-in"
NO_SHOW_URL = "/api/v1/guests/{guest_id}/no-show"
REGISTER_GUEST_URL = "/api/v1/events/{event_id}/guests"
CHECK_IN_STATS_URL = "/api/v1/events/{event_id}/check-in-stats"
