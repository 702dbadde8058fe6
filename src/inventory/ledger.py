"""Capacity bookkeeping of a single resource pool.

A pool tracks ``blocked`` units (what the hotel or airline holds for the
event) and ``confirmed`` units (what guests took). Nothing here knows about
guests or waitlists.
"""

from dataclasses import replace

from src.events import CapacityAlertEvent
from src.inventory.dtos import (
    Granted,
    InventoryType,
    PoolUtilization,
    Queued,
    ResourcePoolDTO,
    UtilizationSeverity,
)
from src.policy import DEFAULT_POLICY, AllocationPolicy


def try_confirm(pool: ResourcePoolDTO, units: int) -> Granted | Queued:
    """Take ``units`` from the pool, or report that the requester has to queue."""
    if units < 1:
        raise ValueError(f"Cannot confirm {units} units")
    if units > pool.available:
        return Queued(pool=pool, units=units)
    return Granted(pool=replace(pool, confirmed=pool.confirmed + units), units=units)


def utilization_pct(pool: ResourcePoolDTO) -> int:
    if pool.blocked <= 0:
        return 0
    # round half up
    return (pool.confirmed * 200 + pool.blocked) // (pool.blocked * 2)


def severity_of(pct: int, policy: AllocationPolicy = DEFAULT_POLICY) -> UtilizationSeverity:
    if pct >= policy.critical_pct:
        return UtilizationSeverity.CRITICAL
    if pct >= policy.warning_pct:
        return UtilizationSeverity.WARNING
    return UtilizationSeverity.OK


def _message(pool: ResourcePoolDTO, pct: int, severity: UtilizationSeverity) -> str:
    available = pool.available
    if pool.inventory_type == InventoryType.FLIGHT:
        return f"Flight block {pct}% utilized, {available} seats remaining"
    if severity == UtilizationSeverity.CRITICAL:
        return f"Only {available} room{'' if available == 1 else 's'} remaining, act now"
    if severity == UtilizationSeverity.WARNING:
        return f"{pct}% of rooms confirmed, {available} still available"
    return f"{available} rooms available"


def utilization(
    pool: ResourcePoolDTO, policy: AllocationPolicy = DEFAULT_POLICY
) -> PoolUtilization:
    pct = utilization_pct(pool)
    severity = severity_of(pct, policy)
    return PoolUtilization(
        pool_id=pool.uuid,
        name=pool.name,
        blocked=pool.blocked,
        confirmed=pool.confirmed,
        available=pool.available,
        utilization_pct=pct,
        severity=severity,
        message=_message(pool, pct, severity),
    )


def capacity_alerts(
    before: ResourcePoolDTO,
    after: ResourcePoolDTO,
    policy: AllocationPolicy = DEFAULT_POLICY,
) -> tuple[CapacityAlertEvent, ...]:
    """Alert when a change pushed the pool into a worse severity."""
    old = severity_of(utilization_pct(before), policy)
    new = utilization(after, policy)
    if new.severity.rank <= old.rank:
        return ()
    return (
        CapacityAlertEvent(pool_id=after.uuid, severity=new.severity.value, message=new.message),
    )
