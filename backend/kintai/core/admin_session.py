"""
Time-limited administrator unlock.

The session is an explicit value built from the unlock instant and the lock
timeout; nothing is kept in process memory between requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from kintai.core.config import settings


def default_timeout() -> timedelta:
    return timedelta(minutes=settings.ADMIN_LOCK_TIMEOUT_MINUTES)


@dataclass(frozen=True)
class AdminSession:
    unlocked_at: datetime
    timeout: timedelta

    @property
    def expires_at(self) -> datetime:
        return self.unlocked_at + self.timeout

    def is_locked(self, now: datetime) -> bool:
        return now >= self.expires_at

    def remaining(self, now: datetime) -> timedelta:
        left = self.expires_at - now
        return left if left > timedelta(0) else timedelta(0)
