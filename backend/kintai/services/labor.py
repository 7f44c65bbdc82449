"""
Net working time from raw punch events.

Only the first clock_in and the last clock_out of a day bound the shift;
breaks are paired inside that window with a single open-break slot.
Noisy punch data (double punches, stray break_end, unclosed breaks) never
raises: the minutes follow the tolerant pairing rule and the irregularities
are reported as anomaly flags by ``daily_attendance``.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, tzinfo

from kintai.schemas.payroll import AnomalyFlag, DailyAttendance
from kintai.schemas.timecard import ClockEvent


def net_working_minutes(start: datetime | None, end: datetime | None) -> int:
    """Whole minutes between two instants, seconds truncated; 0 if end < start."""
    if start is None or end is None:
        return 0
    diff_seconds = int((end - start).total_seconds())
    if diff_seconds < 0:
        return 0
    return diff_seconds // 60


def _sorted(events: Iterable[ClockEvent]) -> list[ClockEvent]:
    return sorted(events, key=lambda e: e.timestamp)


def _shift_bounds(
    events: Sequence[ClockEvent],
) -> tuple[ClockEvent | None, ClockEvent | None]:
    first_in = next((e for e in events if e.event_type == "clock_in"), None)
    last_out = next((e for e in reversed(events) if e.event_type == "clock_out"), None)
    return first_in, last_out


def _pair_breaks(
    events: Sequence[ClockEvent], start: datetime, end: datetime
) -> tuple[int, list[AnomalyFlag]]:
    total_break = 0
    anomalies: list[AnomalyFlag] = []
    open_break: datetime | None = None

    for event in events:
        if event.timestamp < start or event.timestamp > end:
            continue
        if event.event_type == "break_start":
            if open_break is None:
                open_break = event.timestamp
            elif "duplicate_break_start" not in anomalies:
                anomalies.append("duplicate_break_start")
        elif event.event_type == "break_end":
            if open_break is not None:
                total_break += net_working_minutes(open_break, event.timestamp)
                open_break = None
            elif "stray_break_end" not in anomalies:
                anomalies.append("stray_break_end")

    if open_break is not None:
        anomalies.append("unclosed_break")
    return total_break, anomalies


def daily_attendance(events: Iterable[ClockEvent]) -> DailyAttendance:
    """Net minutes for one staff member on one day, with the shift breakdown."""
    ordered = _sorted(events)
    first_in, last_out = _shift_bounds(ordered)

    if first_in is None or last_out is None:
        anomalies: list[AnomalyFlag] = []
        if ordered and first_in is None:
            anomalies.append("missing_clock_in")
        if ordered and last_out is None:
            anomalies.append("missing_clock_out")
        return DailyAttendance(
            first_clock_in=first_in.timestamp if first_in else None,
            last_clock_out=last_out.timestamp if last_out else None,
            anomalies=anomalies,
        )

    gross = net_working_minutes(first_in.timestamp, last_out.timestamp)
    total_break, anomalies = _pair_breaks(ordered, first_in.timestamp, last_out.timestamp)

    return DailyAttendance(
        first_clock_in=first_in.timestamp,
        last_clock_out=last_out.timestamp,
        gross_minutes=gross,
        break_minutes=total_break,
        net_minutes=max(0, gross - total_break),
        anomalies=anomalies,
    )


def daily_net_minutes(events: Iterable[ClockEvent]) -> int:
    return daily_attendance(events).net_minutes


def local_date(ts: datetime, tz: tzinfo) -> date:
    return ts.astimezone(tz).date()


def group_by_local_day(
    events: Iterable[ClockEvent], tz: tzinfo
) -> dict[date, list[ClockEvent]]:
    """Group events by calendar day in ``tz``; days are returned in ascending order."""
    grouped: dict[date, list[ClockEvent]] = defaultdict(list)
    for event in events:
        grouped[local_date(event.timestamp, tz)].append(event)
    return {day: grouped[day] for day in sorted(grouped)}


def monthly_net_minutes(
    staff_id: uuid.UUID, events: Iterable[ClockEvent], tz: tzinfo
) -> int:
    """
    Sum of daily net minutes for one staff member.

    A shift must start and end on the same local calendar day to count.
    """
    own = [e for e in events if e.staff_id == staff_id]
    return sum(
        daily_net_minutes(day_events)
        for day_events in group_by_local_day(own, tz).values()
    )
