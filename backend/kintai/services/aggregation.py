"""
Read models for the dashboard, ledger, payslip, attendance-detail and
analytics surfaces.

Every surface goes through the same path: events are split per staff member,
grouped by local calendar day, turned into net minutes by
``kintai.services.labor`` and priced by ``kintai.services.payroll``.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from kintai.core.config import settings
from kintai.schemas.payroll import (
    AttendanceDetail,
    DailyAttendance,
    DailyLaborCost,
    Payslip,
    StaffPeriodSummary,
    StaffWageProfile,
)
from kintai.schemas.timecard import ClockEvent
from kintai.services.labor import daily_attendance, group_by_local_day
from kintai.services.payroll import compute_payroll, gross_wage, hours_from_minutes

logger = logging.getLogger(__name__)

_PIN_SORT_FALLBACK = 999_999


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def parse_month(value: str) -> date:
    """Parse ``YYYY-MM`` into the first day of that month. Raises ValueError."""
    parsed = datetime.strptime(value, "%Y-%m")
    return date(parsed.year, parsed.month, 1)


def _next_month(first_day: date) -> date:
    if first_day.month == 12:
        return date(first_day.year + 1, 1, 1)
    return date(first_day.year, first_day.month + 1, 1)


def month_range(first_day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Local-time month boundaries as aware datetimes: [start, end] inclusive."""
    start = datetime.combine(first_day, time.min, tzinfo=tz)
    end = datetime.combine(_next_month(first_day), time.min, tzinfo=tz) - timedelta(
        microseconds=1
    )
    return start, end


def pin_sort_key(profile: StaffWageProfile) -> tuple[int, str]:
    """PIN ascending; staff without a numeric PIN go last."""
    pin = (profile.pin or "").strip()
    number = int(pin) if pin.isdigit() else _PIN_SORT_FALLBACK
    return number, profile.name


def events_by_staff(events: Iterable[ClockEvent]) -> dict[uuid.UUID, list[ClockEvent]]:
    grouped: dict[uuid.UUID, list[ClockEvent]] = defaultdict(list)
    for event in events:
        grouped[event.staff_id].append(event)
    return grouped


def daily_breakdown(
    staff_id: uuid.UUID, events: Iterable[ClockEvent], tz: tzinfo
) -> list[DailyAttendance]:
    days: list[DailyAttendance] = []
    for work_date, day_events in group_by_local_day(events, tz).items():
        day = daily_attendance(day_events)
        if day.anomalies:
            logger.debug(
                "Irregular punches: staff=%s date=%s flags=%s",
                staff_id, work_date, ",".join(day.anomalies),
            )
        days.append(day.model_copy(update={"staff_id": staff_id, "work_date": work_date}))
    return days


def summarize_staff(
    profile: StaffWageProfile, events: Iterable[ClockEvent], tz: tzinfo
) -> StaffPeriodSummary:
    own = [e for e in events if e.staff_id == profile.id]
    days = daily_breakdown(profile.id, own, tz)
    total_minutes = sum(d.net_minutes for d in days)
    payroll = compute_payroll(profile, total_minutes)

    return StaffPeriodSummary(
        staff_id=profile.id,
        name=profile.name,
        pin=profile.pin,
        role=profile.role,
        hourly_wage=profile.hourly_wage,
        total_minutes=total_minutes,
        total_hours=payroll.total_hours,
        gross_wage=payroll.gross_wage,
        tax=payroll.tax,
        net_pay=payroll.net_pay,
        worked_days=sum(1 for d in days if d.net_minutes > 0),
    )


def build_ledger(
    profiles: Sequence[StaffWageProfile], events: Iterable[ClockEvent], tz: tzinfo
) -> list[StaffPeriodSummary]:
    """One row per non-admin staff member, sorted by PIN."""
    grouped = events_by_staff(events)
    staff = sorted((p for p in profiles if p.role != "admin"), key=pin_sort_key)
    return [summarize_staff(p, grouped.get(p.id, []), tz) for p in staff]


def build_payslips(
    profiles: Sequence[StaffWageProfile],
    events: Iterable[ClockEvent],
    tz: tzinfo,
    month: str,
) -> list[Payslip]:
    grouped = events_by_staff(events)
    payslips: list[Payslip] = []
    for profile in sorted(profiles, key=pin_sort_key):
        days = daily_breakdown(profile.id, grouped.get(profile.id, []), tz)
        minutes = sum(d.net_minutes for d in days)
        payslips.append(
            Payslip(
                staff_id=profile.id,
                name=profile.name,
                pin=profile.pin,
                month=month,
                payroll=compute_payroll(profile, minutes),
            )
        )
    return payslips


def attendance_detail(
    profile: StaffWageProfile,
    events: Iterable[ClockEvent],
    tz: tzinfo,
    month: str,
) -> AttendanceDetail:
    own = [e for e in events if e.staff_id == profile.id]
    days = daily_breakdown(profile.id, own, tz)
    total_minutes = sum(d.net_minutes for d in days)
    return AttendanceDetail(
        staff_id=profile.id,
        name=profile.name,
        month=month,
        days=days,
        total_minutes=total_minutes,
        total_hours=hours_from_minutes(total_minutes),
    )


def daily_labor_costs(
    profiles: Sequence[StaffWageProfile], events: Iterable[ClockEvent], tz: tzinfo
) -> list[DailyLaborCost]:
    """Per local date: staff who worked, their net minutes and labour cost."""
    wages = {p.id: p.hourly_wage for p in profiles}
    per_day: dict[date, list[tuple[int, int]]] = defaultdict(list)

    for staff_id, staff_events in events_by_staff(events).items():
        if staff_id not in wages:
            continue
        for day in daily_breakdown(staff_id, staff_events, tz):
            if day.net_minutes <= 0:
                continue
            cost = gross_wage(day.net_minutes, wages[staff_id])
            per_day[day.work_date].append((day.net_minutes, cost))

    return [
        DailyLaborCost(
            work_date=work_date,
            staff_count=len(items),
            total_minutes=sum(m for m, _ in items),
            total_cost=sum(c for _, c in items),
        )
        for work_date, items in sorted(per_day.items())
    ]
