"""Response models shared by the inventory features."""

from uuid import UUID

from pydantic import BaseModel

from src.inventory.dtos import AllocationResult


class PoolResponse(BaseModel):
    uuid: UUID
    name: str
    blocked: int
    confirmed: int
    available: int


class AllocationResponse(BaseModel):
    pool: PoolResponse
    waitlisted: int
    promoted_guest_ids: list[UUID] = []

    @classmethod
    def from_result(cls, result: AllocationResult) -> "AllocationResponse":
        pool = result.pool
        return cls(
            pool=PoolResponse(
                uuid=pool.uuid,
                name=pool.name,
                blocked=pool.blocked,
                confirmed=pool.confirmed,
                available=pool.available,
            ),
            waitlisted=len(result.waitlist),
            promoted_guest_ids=[g.uuid for g in result.promoted],
        )
