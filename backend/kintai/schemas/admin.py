from datetime import datetime

from pydantic import BaseModel, Field


class UnlockRequest(BaseModel):
    pin: str = Field(..., min_length=4, max_length=8, pattern=r"^\d+$")


class UnlockResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class SessionStatus(BaseModel):
    unlocked_at: datetime
    expires_at: datetime
    remaining_seconds: int
