from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.decisions import AlreadyQueuedError
from src.guests.dtos import TierDTO
from src.inventory.dtos import WaitlistEntryDTO
from src.policy import AllocationPolicy


def waitlist_priority_for(tier: TierDTO | None, policy: AllocationPolicy) -> int:
    """Priority of a guest on any waitlist: 1 is served first.

    An explicit priority on the tier wins; otherwise the first policy keyword
    found in the tier name ("VIP Guests" -> 1, "Close Family" -> 2).
    """
    if tier is None:
        return policy.default_priority
    if tier.waitlist_priority is not None:
        return tier.waitlist_priority
    name = tier.name.lower()
    for keyword, priority in policy.priority_keywords:
        if keyword.lower() in name:
            return priority
    return policy.default_priority


@dataclass(frozen=True)
class WaitlistQueue:
    """Immutable waitlist of one pool, kept in (priority, joined_at) order."""

    pool_id: UUID
    entries: tuple[WaitlistEntryDTO, ...] = ()

    def __post_init__(self) -> None:
        for entry in self.entries:
            if entry.pool_id != self.pool_id:
                raise ValueError(f"Entry of pool {entry.pool_id} in waitlist of pool {self.pool_id}")
        object.__setattr__(self, "entries", tuple(sorted(self.entries)))

    @classmethod
    def of(cls, pool_id: UUID, entries: Iterable[WaitlistEntryDTO]) -> "WaitlistQueue":
        return cls(pool_id=pool_id, entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, guest_id: object) -> bool:
        return any(e.guest_id == guest_id for e in self.entries)

    def ordered(self) -> tuple[WaitlistEntryDTO, ...]:
        return self.entries

    def head(self) -> WaitlistEntryDTO | None:
        return self.entries[0] if self.entries else None

    def get(self, guest_id: UUID) -> WaitlistEntryDTO | None:
        return next((e for e in self.entries if e.guest_id == guest_id), None)

    def position(self, guest_id: UUID) -> int | None:
        for index, entry in enumerate(self.entries, start=1):
            if entry.guest_id == guest_id:
                return index
        return None

    def join(self, entry: WaitlistEntryDTO) -> "WaitlistQueue":
        if entry.guest_id in self:
            raise AlreadyQueuedError(entry.guest_id, self.pool_id)
        return WaitlistQueue(pool_id=self.pool_id, entries=self.entries + (entry,))

    def leave(self, guest_id: UUID) -> "WaitlistQueue":
        if guest_id not in self:
            return self
        return WaitlistQueue(
            pool_id=self.pool_id,
            entries=tuple(e for e in self.entries if e.guest_id != guest_id),
        )

    def serves_before(self, priority: int, joined_at: datetime) -> bool:
        """True if someone already queued would be served before a newcomer."""
        head = self.head()
        return head is not None and (head.priority, head.joined_at) <= (priority, joined_at)
