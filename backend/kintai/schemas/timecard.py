from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

EventType = Literal["clock_in", "break_start", "break_end", "clock_out"]
StaffStatus = Literal["clock_in", "break_start", "break_end", "clock_out", "unknown"]


class ClockEvent(BaseModel):
    """One punch. Immutable apart from the correction flag, which is set on replacement."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    staff_id: UUID
    event_type: EventType
    timestamp: datetime
    is_modified_by_admin: bool = False
    id: int | None = None

    @field_validator("timestamp")
    @classmethod
    def must_be_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.tzinfo.utcoffset(v) is None:
            raise ValueError("timestamp must be timezone-aware")
        return v


class PunchRequest(BaseModel):
    staff_id: UUID
    event_type: EventType


class LogCorrection(BaseModel):
    staff_id: UUID
    event_type: EventType
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def must_be_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.tzinfo.utcoffset(v) is None:
            raise ValueError("timestamp must include a UTC offset")
        return v


class TimecardLogEntry(BaseModel):
    id: int
    staff_id: UUID
    event_type: EventType
    timestamp: datetime
    is_modified_by_admin: bool


class StaffStatusEntry(BaseModel):
    staff_id: UUID
    name: str
    pin: str | None
    status: StaffStatus
    last_event_time: datetime | None
