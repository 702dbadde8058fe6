"""HTTP status codes for the error kinds of a failed decision."""

from fastapi import HTTPException, status

from src.decisions import (
    Decision,
    EngineError,
    InvalidReleaseError,
    InvalidSeatCountError,
    ScheduleConflictError,
)

UNPROCESSABLE_ERRORS = (InvalidSeatCountError, InvalidReleaseError)


def error_detail(error: EngineError) -> dict:
    detail = {"code": error.code, "message": str(error)}
    if isinstance(error, ScheduleConflictError):
        detail["conflicts"] = [
            {"uuid": str(s.uuid), "title": s.title} for s in error.conflicts
        ]
    return detail


def http_error(error: EngineError) -> HTTPException:
    if isinstance(error, UNPROCESSABLE_ERRORS):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=error_detail(error))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error_detail(error))


def raise_for_decision(result: Decision) -> None:
    if not result.ok:
        raise http_error(result.error)
