INVENTORY_STATUS_URL = "/api/v1/events/{event_id}/inventory/status"
RELEASE_UNITS_URL = "/api/v1/pools/{pool_id}/release"
RESIZE_BLOCK_URL = "/api/v1/pools/{pool_id}/block"
LEAVE_WAITLIST_URL = "/api/v1/pools/{pool_id}/waitlist/{guest_id}"
