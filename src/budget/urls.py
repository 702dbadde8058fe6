CREATE_REQUEST_URL = "/api/v1/guests/{guest_id}/requests"
REVIEW_REQUEST_URL = "/api/v1/requests/{request_id}/review"
BULK_APPROVE_URL = "/api/v1/events/{event_id}/requests/approve-all"
BUDGET_SUMMARY_URL = "/api/v1/events/{event_id}/budget"
