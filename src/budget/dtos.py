from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.budget.repository.orm_models import GuestRequest, Perk, TierPerk


class PricingType(str, Enum):
    INCLUDED = "included"  # pre-paid by the client, always granted
    REQUESTABLE = "requestable"  # paid from the tier's add-on budget
    SELF_PAY = "self_pay"  # the guest pays, agent confirms availability


class RequestType(str, Enum):
    PERK_REQUEST = "perk_request"
    CUSTOM = "custom"


class AddonType(str, Enum):
    ROOM_UPGRADE = "room_upgrade"
    AIRPORT_TRANSFER = "airport_transfer"
    EXTRA_BED = "extra_bed"
    EARLY_CHECKIN = "early_checkin"
    LATE_CHECKOUT = "late_checkout"
    RETURN_FLIGHT = "return_flight"
    SIGHTSEEING = "sightseeing"
    CUSTOM = "custom"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FORWARDED_TO_CLIENT = "forwarded_to_client"


class ReviewAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    FORWARD_TO_CLIENT = "forward_to_client"

    @property
    def target(self) -> RequestStatus:
        return {
            ReviewAction.APPROVE: RequestStatus.APPROVED,
            ReviewAction.REJECT: RequestStatus.REJECTED,
            ReviewAction.FORWARD_TO_CLIENT: RequestStatus.FORWARDED_TO_CLIENT,
        }[self]


@dataclass(frozen=True)
class PerkDTO:
    uuid: UUID
    event_id: UUID
    name: str
    perk_type: str = "activity"
    unit_cost: int = 0
    pricing_type: PricingType = PricingType.REQUESTABLE
    currency: str = "INR"

    @classmethod
    def from_model(cls, perk: "Perk") -> "PerkDTO":
        return cls(
            uuid=perk.uuid,
            event_id=perk.event_id,
            name=perk.name,
            perk_type=perk.perk_type,
            unit_cost=perk.unit_cost,
            pricing_type=PricingType(perk.pricing_type),
            currency=perk.currency,
        )


@dataclass(frozen=True)
class LabelPerkDTO:
    """How one perk is offered to one tier."""

    label_id: UUID
    perk_id: UUID
    is_enabled: bool = True
    expense_handled_by_client: bool = False
    # tier-specific cost; None falls back to the perk's unit cost
    budget_consumed: int | None = None
    agent_override: bool = False

    @classmethod
    def from_model(cls, tier_perk: "TierPerk") -> "LabelPerkDTO":
        return cls(
            label_id=tier_perk.tier_id,
            perk_id=tier_perk.perk_id,
            is_enabled=tier_perk.is_enabled,
            expense_handled_by_client=tier_perk.expense_handled_by_client,
            budget_consumed=tier_perk.budget_consumed,
            agent_override=tier_perk.agent_override,
        )


@dataclass(frozen=True)
class GuestRequestDTO:
    uuid: UUID
    guest_id: UUID
    request_type: RequestType
    status: RequestStatus = RequestStatus.PENDING
    perk_id: UUID | None = None
    addon_type: AddonType | None = None
    budget_consumed: int = 0
    was_forwarded: bool = False
    notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, request: "GuestRequest") -> "GuestRequestDTO":
        return cls(
            uuid=request.uuid,
            guest_id=request.guest_id,
            request_type=RequestType(request.request_type),
            status=RequestStatus(request.status),
            perk_id=request.perk_id,
            addon_type=AddonType(request.addon_type) if request.addon_type else None,
            budget_consumed=request.budget_consumed,
            was_forwarded=request.was_forwarded,
            notes=request.notes,
            created_at=request.created_at,
        )


@dataclass(frozen=True)
class BulkApprovalReport:
    approved: tuple[GuestRequestDTO, ...] = ()
    # request id -> reason the approval was refused
    failed: dict[UUID, str] = field(default_factory=dict)

    @property
    def approved_count(self) -> int:
        return len(self.approved)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


@dataclass(frozen=True)
class TierBudgetSummary:
    tier_id: UUID
    tier_name: str
    guest_count: int
    budget_per_guest: int
    allocated: int
    used: int

    @property
    def remaining(self) -> int:
        return self.allocated - self.used
