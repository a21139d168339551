"""
Log and vacation-day schemas.

PUT    /activities/{id}/logs/{day}   → LogRequest → LogResponse
GET    /activities/{id}/logs         → list[LogResponse]
POST   /vacation-days                → VacationDayRequest → VacationDayResponse
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from cadence.engine.types import LogStatus


class LogRequest(BaseModel):
    status: LogStatus = LogStatus.completed
    value: Optional[float] = Field(
        default=None, description="Recorded quantity for value, cumulative and metric activities."
    )
    note: Optional[str] = None
    skip_reason: Optional[str] = Field(default=None, max_length=256)
    media_ref: Optional[str] = Field(default=None, max_length=256)


class LogResponse(BaseModel):
    id: int
    activity_id: int
    day: str
    status: LogStatus
    value: Optional[float] = None
    note: Optional[str] = None
    skip_reason: Optional[str] = None
    media_ref: Optional[str] = None


class VacationDayRequest(BaseModel):
    day: date = Field(examples=["2024-07-01"])


class VacationDayResponse(BaseModel):
    id: int
    day: str
