"""Discretionary add-on spend per guest.

All amounts are integers in minor currency units (paise, cents).
"""

from collections import defaultdict
from collections.abc import Iterable
from uuid import UUID

from src.budget.dtos import GuestRequestDTO, RequestStatus, TierBudgetSummary
from src.guests.dtos import GuestDTO, TierDTO


def used_budget(guest_id: UUID, requests: Iterable[GuestRequestDTO]) -> int:
    return sum(
        r.budget_consumed
        for r in requests
        if r.guest_id == guest_id and r.status == RequestStatus.APPROVED
    )


def remaining_budget(tier: TierDTO | None, used: int) -> int:
    """Can be negative: the allowance is a soft limit, agents may approve past it."""
    allowance = tier.add_on_budget if tier else 0
    return allowance - used


def summarize_budget(
    tiers: Iterable[TierDTO],
    guests: Iterable[GuestDTO],
    requests: Iterable[GuestRequestDTO],
) -> list[TierBudgetSummary]:
    """Allocated vs used add-on budget for each tier of an event."""
    guest_tier: dict[UUID, UUID | None] = {g.uuid: g.label_id for g in guests}
    guest_count: dict[UUID, int] = defaultdict(int)
    for tier_id in guest_tier.values():
        if tier_id is not None:
            guest_count[tier_id] += 1

    used: dict[UUID, int] = defaultdict(int)
    for request in requests:
        tier_id = guest_tier.get(request.guest_id)
        if tier_id is not None and request.status == RequestStatus.APPROVED:
            used[tier_id] += request.budget_consumed

    return [
        TierBudgetSummary(
            tier_id=tier.uuid,
            tier_name=tier.name,
            guest_count=guest_count[tier.uuid],
            budget_per_guest=tier.add_on_budget,
            allocated=tier.add_on_budget * guest_count[tier.uuid],
            used=used[tier.uuid],
        )
        for tier in tiers
    ]
