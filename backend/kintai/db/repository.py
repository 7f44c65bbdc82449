"""
Data access for the aggregation engine.

Rows are converted to plain ``ClockEvent`` / ``StaffWageProfile`` values so
that the calculators never touch ORM objects or sessions.
"""

from __future__ import annotations

import uuid
from collections.abc import Collection
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kintai.db.models import Staff, TimecardLog
from kintai.schemas.payroll import PayItem, StaffWageProfile
from kintai.schemas.timecard import ClockEvent


def _as_utc(ts: datetime) -> datetime:
    # Some drivers (SQLite) hand back naive values; stored values are UTC.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def to_clock_event(log: TimecardLog) -> ClockEvent:
    return ClockEvent(
        id=log.id,
        staff_id=log.staff_id,
        event_type=log.event_type,
        timestamp=_as_utc(log.timestamp),
        is_modified_by_admin=log.is_modified_by_admin,
    )


def _items(pairs: list[tuple[str | None, int | None]]) -> tuple[PayItem, ...]:
    """Only slots with both a name and a non-zero amount count."""
    return tuple(PayItem(name=name, value=value) for name, value in pairs if name and value)


def to_wage_profile(staff: Staff) -> StaffWageProfile:
    return StaffWageProfile(
        id=staff.id,
        name=staff.name,
        pin=staff.pin,
        role=staff.role,
        hourly_wage=staff.hourly_wage or 0,
        dependents=staff.dependents or 0,
        tax_category=staff.tax_category or "甲",
        allowances=_items(
            [
                (staff.allowance1_name, staff.allowance1_value),
                (staff.allowance2_name, staff.allowance2_value),
                (staff.allowance3_name, staff.allowance3_value),
            ]
        ),
        deductions=_items(
            [
                (staff.deduction1_name, staff.deduction1_value),
                (staff.deduction2_name, staff.deduction2_value),
            ]
        ),
    )


async def fetch_events(
    db: AsyncSession,
    staff_ids: Collection[uuid.UUID] | None,
    start: datetime,
    end: datetime,
) -> list[ClockEvent]:
    """Events with start <= timestamp <= end, ascending; None means all staff."""
    # bounds are compared in UTC, the zone every timestamp is stored in
    start, end = start.astimezone(timezone.utc), end.astimezone(timezone.utc)
    stmt = select(TimecardLog).where(TimecardLog.timestamp.between(start, end))
    if staff_ids is not None:
        stmt = stmt.where(TimecardLog.staff_id.in_(list(staff_ids)))
    stmt = stmt.order_by(TimecardLog.timestamp, TimecardLog.id)

    result = await db.execute(stmt)
    return [to_clock_event(log) for log in result.scalars().all()]


async def fetch_staff_profiles(
    db: AsyncSession,
    staff_ids: Collection[uuid.UUID] | None = None,
    *,
    include_admins: bool = False,
) -> list[StaffWageProfile]:
    stmt = select(Staff)
    if staff_ids is not None:
        stmt = stmt.where(Staff.id.in_(list(staff_ids)))
    if not include_admins:
        stmt = stmt.where((Staff.role.is_(None)) | (Staff.role != "admin"))
    stmt = stmt.order_by(Staff.name)

    result = await db.execute(stmt)
    return [to_wage_profile(s) for s in result.scalars().all()]


async def latest_event(db: AsyncSession, staff_id: uuid.UUID) -> ClockEvent | None:
    result = await db.execute(
        select(TimecardLog)
        .where(TimecardLog.staff_id == staff_id)
        .order_by(TimecardLog.timestamp.desc(), TimecardLog.id.desc())
        .limit(1)
    )
    log = result.scalar_one_or_none()
    return to_clock_event(log) if log is not None else None
