"""
Custom exception hierarchy for Cadence.

The scoring engine never raises on well-formed data; these errors guard the
write boundary (structural changes, logs, goal links) and lookups by id.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class CadenceException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ActivityNotFoundError(CadenceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ACTIVITY_NOT_FOUND"

    def __init__(self, activity_id: int):
        super().__init__(
            message=f"Activity {activity_id} does not exist.",
            details={"activity_id": activity_id},
        )


class GoalNotFoundError(CadenceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "GOAL_NOT_FOUND"

    def __init__(self, goal_id: int):
        super().__init__(
            message=f"Goal {goal_id} does not exist.",
            details={"goal_id": goal_id},
        )


class GoalLinkNotFoundError(CadenceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "GOAL_LINK_NOT_FOUND"

    def __init__(self, goal_id: int, link_id: int):
        super().__init__(
            message=f"Goal {goal_id} has no link {link_id}.",
            details={"goal_id": goal_id, "link_id": link_id},
        )


class LogNotFoundError(CadenceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "LOG_NOT_FOUND"

    def __init__(self, activity_id: int, day: date):
        super().__init__(
            message=f"Activity {activity_id} has no log on {day}.",
            details={"activity_id": activity_id, "day": str(day)},
        )


class InvalidParentError(CadenceException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_PARENT"

    def __init__(self, activity_id: int, parent_id: int, reason: str):
        super().__init__(
            message=f"Activity {parent_id} cannot hold activity {activity_id}: {reason}",
            details={"activity_id": activity_id, "parent_id": parent_id, "reason": reason},
        )


class AlreadyContainerError(CadenceException):
    http_status = status.HTTP_409_CONFLICT
    code = "ALREADY_CONTAINER"

    def __init__(self, activity_id: int):
        super().__init__(
            message=f"Activity {activity_id} is already a container.",
            details={"activity_id": activity_id},
        )


class NotAContainerError(CadenceException):
    http_status = status.HTTP_409_CONFLICT
    code = "NOT_A_CONTAINER"

    def __init__(self, activity_id: int):
        super().__init__(
            message=f"Activity {activity_id} is not a container.",
            details={"activity_id": activity_id},
        )


class StructuralChangeRequiredError(CadenceException):
    http_status = status.HTTP_409_CONFLICT
    code = "STRUCTURAL_CHANGE_REQUIRED"

    def __init__(self, activity_id: int, endpoint: str):
        super().__init__(
            message=f"Changing activity {activity_id} to or from a container requires {endpoint}.",
            details={"activity_id": activity_id, "endpoint": endpoint},
        )


class SnapshotOverlapError(CadenceException):
    http_status = status.HTTP_409_CONFLICT
    code = "SNAPSHOT_OVERLAP"

    def __init__(self, activity_id: int, effective_from: date, effective_until: date):
        super().__init__(
            message=(
                f"Snapshot [{effective_from}, {effective_until}] overlaps existing "
                f"history of activity {activity_id}."
            ),
            details={
                "activity_id": activity_id,
                "effective_from": str(effective_from),
                "effective_until": str(effective_until),
            },
        )


class LogOutsideLifetimeError(CadenceException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "LOG_OUTSIDE_LIFETIME"

    def __init__(self, activity_id: int, day: date):
        super().__init__(
            message=f"Activity {activity_id} is not active on {day}.",
            details={"activity_id": activity_id, "day": str(day)},
        )


class ContainerLogError(CadenceException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "CONTAINER_LOG"

    def __init__(self, activity_id: int, day: date):
        super().__init__(
            message=f"Activity {activity_id} is a container on {day}; log its children instead.",
            details={"activity_id": activity_id, "day": str(day)},
        )


class DuplicateGoalLinkError(CadenceException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_GOAL_LINK"

    def __init__(self, goal_id: int, activity_id: int, role: str):
        super().__init__(
            message=f"Activity {activity_id} is already linked to goal {goal_id} as {role}.",
            details={"goal_id": goal_id, "activity_id": activity_id, "role": role},
        )


class DoubleCountedLinkError(CadenceException):
    http_status = status.HTTP_409_CONFLICT
    code = "DOUBLE_COUNTED_LINK"

    def __init__(self, goal_id: int, activity_id: int, covered_by: int):
        super().__init__(
            message=(
                f"Activity {activity_id} would be counted twice in goal {goal_id} "
                f"(overlaps linked activity {covered_by})."
            ),
            details={"goal_id": goal_id, "activity_id": activity_id, "covered_by": covered_by},
        )


class InvalidMetricLinkError(CadenceException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_METRIC_LINK"

    def __init__(self, activity_id: int, reason: str):
        super().__init__(
            message=f"Activity {activity_id} cannot be linked as a metric: {reason}",
            details={"activity_id": activity_id, "reason": reason},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def cadence_exception_handler(request: Request, exc: CadenceException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
