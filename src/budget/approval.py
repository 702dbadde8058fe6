"""Approval of perk and add-on requests against the tier allowance.

Going over budget is never an error: the request simply waits for an agent.
Nothing is rejected automatically.
"""

from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from src.budget.dtos import (
    AddonType,
    BulkApprovalReport,
    GuestRequestDTO,
    LabelPerkDTO,
    PerkDTO,
    PricingType,
    RequestStatus,
    RequestType,
    ReviewAction,
)
from src.budget.ledger import used_budget
from src.decisions import Decision, InvalidTransitionError, decision
from src.events import DomainEvent, RequestDecidedEvent
from src.guests.dtos import GuestDTO, TierDTO

REQUEST_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset(
        {RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.FORWARDED_TO_CLIENT}
    ),
    RequestStatus.FORWARDED_TO_CLIENT: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


def is_pre_committed(perk: PerkDTO | None, label_perk: LabelPerkDTO | None) -> bool:
    """Included perks and perks the client pays for never touch the guest's allowance."""
    if perk is None:
        return False
    return perk.pricing_type == PricingType.INCLUDED or bool(
        label_perk and label_perk.expense_handled_by_client
    )


def decide_initial_status(
    perk: PerkDTO | None,
    label_perk: LabelPerkDTO | None,
    allowance: int,
    used: int,
    cost: int,
) -> RequestStatus:
    if is_pre_committed(perk, label_perk):
        return RequestStatus.APPROVED
    if perk is not None:
        if perk.pricing_type == PricingType.SELF_PAY:
            return RequestStatus.PENDING
        if label_perk is not None and not label_perk.is_enabled:
            # switched off for this tier, the agent decides
            return RequestStatus.PENDING
        if label_perk is not None and label_perk.agent_override:
            return RequestStatus.APPROVED
    if cost <= allowance - used:
        return RequestStatus.APPROVED
    return RequestStatus.PENDING


def request_cost(
    perk: PerkDTO | None, label_perk: LabelPerkDTO | None, cost: int | None = None
) -> int:
    if is_pre_committed(perk, label_perk):
        return 0
    if cost is not None:
        return cost
    if label_perk is not None and label_perk.budget_consumed is not None:
        return label_perk.budget_consumed
    return perk.unit_cost if perk else 0


@decision
def create_request(
    guest: GuestDTO,
    *,
    tier: TierDTO | None = None,
    perk: PerkDTO | None = None,
    label_perk: LabelPerkDTO | None = None,
    existing_requests: Iterable[GuestRequestDTO] = (),
    cost: int | None = None,
    addon_type: AddonType | None = None,
    notes: str | None = None,
    request_id: UUID | None = None,
    now: datetime | None = None,
) -> Decision[GuestRequestDTO]:
    if cost is not None and cost < 0:
        raise ValueError(f"Request cost cannot be negative: {cost}")

    budget_consumed = request_cost(perk, label_perk, cost)
    status = decide_initial_status(
        perk,
        label_perk,
        allowance=tier.add_on_budget if tier else 0,
        used=used_budget(guest.uuid, existing_requests),
        cost=budget_consumed,
    )
    request = GuestRequestDTO(
        uuid=request_id or uuid4(),
        guest_id=guest.uuid,
        request_type=RequestType.PERK_REQUEST if perk else RequestType.CUSTOM,
        status=status,
        perk_id=perk.uuid if perk else None,
        addon_type=addon_type,
        budget_consumed=budget_consumed,
        notes=notes,
        created_at=now or datetime.now(UTC),
    )
    return Decision.success(
        request,
        [RequestDecidedEvent(request_id=request.uuid, guest_id=guest.uuid, status=status.value)],
    )


@decision
def review_request(
    request: GuestRequestDTO, action: ReviewAction, notes: str | None = None
) -> Decision[GuestRequestDTO]:
    target = action.target
    if target not in REQUEST_TRANSITIONS[request.status]:
        raise InvalidTransitionError("request", request.status.value, target.value)
    if target == RequestStatus.FORWARDED_TO_CLIENT and request.was_forwarded:
        raise InvalidTransitionError("request", "already forwarded", target.value)

    reviewed = replace(
        request,
        status=target,
        was_forwarded=request.was_forwarded or target == RequestStatus.FORWARDED_TO_CLIENT,
        notes=notes if notes is not None else request.notes,
    )
    return Decision.success(
        reviewed,
        [
            RequestDecidedEvent(
                request_id=request.uuid, guest_id=request.guest_id, status=target.value
            )
        ],
    )


@decision
def bulk_approve(requests: Iterable[GuestRequestDTO]) -> Decision[BulkApprovalReport]:
    """Approve every request on its own; one refusal does not stop the others."""
    approved: list[GuestRequestDTO] = []
    failed: dict[UUID, str] = {}
    effects: list[DomainEvent] = []
    for request in requests:
        result = review_request(request, ReviewAction.APPROVE)
        if result.ok:
            approved.append(result.value)
            effects.extend(result.effects)
        else:
            failed[request.uuid] = str(result.error)
    return Decision.success(BulkApprovalReport(approved=tuple(approved), failed=failed), effects)
