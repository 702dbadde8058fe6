from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    TIERS = "tiers"
    PERKS = "perks"
    TIER_PERKS = "tier_perks"
    GUESTS = "guests"
    RESOURCE_POOLS = "resource_pools"
    WAITLIST_ENTRIES = "waitlist_entries"
    GUEST_REQUESTS = "guest_requests"
    ITINERARY_SESSIONS = "itinerary_sessions"
    ITINERARY_REGISTRATIONS = "itinerary_registrations"
