"""Allocation policy handed to the decision functions.

The core never reads settings on its own: whoever calls it builds one
``AllocationPolicy`` (usually ``settings.allocation_policy()``) and passes it in.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AllocationPolicy:
    # (keyword, priority) pairs matched case-insensitively against tier names, in order
    priority_keywords: tuple[tuple[str, int], ...] = (("vip", 1), ("family", 2))
    default_priority: int = 3
    warning_pct: int = 70
    critical_pct: int = 90

    def __post_init__(self) -> None:
        if not 0 <= self.warning_pct <= self.critical_pct <= 100:
            raise ValueError(
                f"Invalid capacity thresholds: warning={self.warning_pct}, critical={self.critical_pct}"
            )


DEFAULT_POLICY = AllocationPolicy()
