"""
Punch intake, live status and administrator corrections.

Staff punches are timestamped by the server. Corrections replace the stored
row and mark it as modified by the administrator.
"""

import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kintai.core.admin_session import AdminSession
from kintai.core.config import settings
from kintai.core.middleware import require_admin_session
from kintai.db import repository
from kintai.db.models import Staff, TimecardLog
from kintai.db.session import get_db
from kintai.schemas.timecard import (
    ClockEvent,
    LogCorrection,
    PunchRequest,
    StaffStatusEntry,
    TimecardLogEntry,
)
from kintai.services.aggregation import get_timezone

logger = logging.getLogger(__name__)

router = APIRouter()

# event type -> statuses it may follow
_ALLOWED_AFTER: dict[str, tuple[str, ...]] = {
    "break_start": ("clock_in", "break_end"),
    "clock_out": ("clock_in", "break_end"),
    "break_end": ("break_start",),
}


def _to_entry(event: ClockEvent) -> TimecardLogEntry:
    return TimecardLogEntry(
        id=event.id,
        staff_id=event.staff_id,
        event_type=event.event_type,
        timestamp=event.timestamp,
        is_modified_by_admin=event.is_modified_by_admin,
    )


def _parse_date(val: str | None, default: date) -> date:
    if val is None:
        return default
    try:
        return date.fromisoformat(val)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date '{val}', expected YYYY-MM-DD",
        )


async def _get_staff(db: AsyncSession, staff_id: uuid.UUID) -> Staff:
    staff = await db.get(Staff, staff_id)
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff not found",
        )
    return staff


async def _get_log(db: AsyncSession, log_id: int) -> TimecardLog:
    log = await db.get(TimecardLog, log_id)
    if log is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Timecard log not found",
        )
    return log


def check_punch(
    event_type: str, latest: ClockEvent | None, now: datetime, window_seconds: float
) -> None:
    """Raise HTTPException if the punch conflicts with the staff member's latest event."""
    if latest is not None:
        if latest.event_type == event_type:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"'{event_type}' has already been recorded",
            )
        # future-dated corrections do not block new punches
        elapsed = (now - latest.timestamp).total_seconds()
        if 0 <= elapsed < window_seconds:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Punch received too soon after the previous one",
            )

    current = latest.event_type if latest is not None else "unknown"
    allowed = _ALLOWED_AFTER.get(event_type)
    if allowed is not None and current not in allowed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot record '{event_type}' while status is '{current}'",
        )


@router.post(
    "/punch",
    response_model=TimecardLogEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Record a clock-in, break or clock-out punch",
)
async def punch(
    body: PunchRequest,
    db: AsyncSession = Depends(get_db),
) -> TimecardLogEntry:
    staff = await _get_staff(db, body.staff_id)
    latest = await repository.latest_event(db, staff.id)
    now = datetime.now(timezone.utc)
    check_punch(body.event_type, latest, now, settings.DUPLICATE_PUNCH_WINDOW_SECONDS)

    log = TimecardLog(
        staff_id=staff.id,
        company_id=staff.company_id,
        event_type=body.event_type,
        timestamp=now,
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)

    logger.info("Punch recorded: staff=%s type=%s", staff.id, body.event_type)
    return _to_entry(repository.to_clock_event(log))


@router.get(
    "/status",
    response_model=list[StaffStatusEntry],
    summary="Current punch status of every staff member",
)
async def current_status(
    db: AsyncSession = Depends(get_db),
) -> list[StaffStatusEntry]:
    result = await db.execute(select(Staff).order_by(Staff.name))
    entries: list[StaffStatusEntry] = []
    for staff in result.scalars().all():
        latest = await repository.latest_event(db, staff.id)
        entries.append(
            StaffStatusEntry(
                staff_id=staff.id,
                name=staff.name,
                pin=staff.pin,
                status=latest.event_type if latest else "unknown",
                last_event_time=latest.timestamp if latest else None,
            )
        )
    return entries


@router.get(
    "/logs",
    response_model=list[TimecardLogEntry],
    summary="Raw punch events in a local date range",
)
async def list_logs(
    date_from: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    date_to: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    staff_id: uuid.UUID | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> list[TimecardLogEntry]:
    tz = get_timezone()
    today = datetime.now(tz).date()
    df = _parse_date(date_from, today - timedelta(days=30))
    dt = _parse_date(date_to, today)

    start = datetime.combine(df, time.min, tzinfo=tz)
    end = datetime.combine(dt, time.max, tzinfo=tz)
    ids = [staff_id] if staff_id is not None else None

    events = await repository.fetch_events(db, ids, start, end)
    return [_to_entry(e) for e in events]


@router.post(
    "/logs",
    response_model=TimecardLogEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Add a punch on behalf of a staff member (admin)",
)
async def create_log(
    body: LogCorrection,
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> TimecardLogEntry:
    staff = await _get_staff(db, body.staff_id)
    log = TimecardLog(
        staff_id=staff.id,
        company_id=staff.company_id,
        event_type=body.event_type,
        timestamp=body.timestamp.astimezone(timezone.utc),
        is_modified_by_admin=True,
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)

    logger.info("Admin added punch: log=%s staff=%s", log.id, staff.id)
    return _to_entry(repository.to_clock_event(log))


@router.put(
    "/logs/{log_id}",
    response_model=TimecardLogEntry,
    summary="Replace the type and time of a punch (admin)",
)
async def update_log(
    log_id: int,
    body: LogCorrection,
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> TimecardLogEntry:
    log = await _get_log(db, log_id)
    if body.staff_id != log.staff_id:
        staff = await _get_staff(db, body.staff_id)
        log.staff_id = staff.id
        log.company_id = staff.company_id

    log.event_type = body.event_type
    log.timestamp = body.timestamp.astimezone(timezone.utc)
    log.is_modified_by_admin = True
    await db.commit()
    await db.refresh(log)

    logger.info("Admin corrected punch: log=%s", log.id)
    return _to_entry(repository.to_clock_event(log))


@router.delete(
    "/logs/{log_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a punch (admin)",
)
async def delete_log(
    log_id: int,
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> Response:
    log = await _get_log(db, log_id)
    await db.delete(log)
    await db.commit()

    logger.info("Admin deleted punch: log=%s", log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
