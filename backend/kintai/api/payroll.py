"""
Monthly payroll reports.

Every endpoint takes ``month=YYYY-MM``; month boundaries are local time in
the configured timezone and converted to UTC for the event query.
"""

import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from kintai.core.admin_session import AdminSession
from kintai.core.middleware import require_admin_session
from kintai.db import repository
from kintai.db.session import get_db
from kintai.schemas.payroll import DailyLaborCost, LedgerResponse, Payslip
from kintai.schemas.timecard import ClockEvent
from kintai.services.aggregation import (
    build_ledger,
    build_payslips,
    daily_labor_costs,
    get_timezone,
    month_range,
    parse_month,
)
from kintai.services.payroll import sum_hours
from kintai.services.report_export import ledger_to_csv, ledger_to_xlsx

logger = logging.getLogger(__name__)

router = APIRouter()

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def month_param(
    month: str = Query(..., description="Target month, YYYY-MM"),
) -> date:
    try:
        return parse_month(month)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid month '{month}', expected YYYY-MM",
        )


def _parse_ids(raw: str | None) -> list[uuid.UUID] | None:
    if not raw:
        return None
    try:
        return [uuid.UUID(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ids must be a comma-separated list of staff UUIDs",
        )


async def _month_events(
    db: AsyncSession, first_day: date, staff_ids: list[uuid.UUID] | None = None
) -> list[ClockEvent]:
    start, end = month_range(first_day, get_timezone())
    return await repository.fetch_events(db, staff_ids, start, end)


async def _ledger(db: AsyncSession, first_day: date) -> LedgerResponse:
    profiles = await repository.fetch_staff_profiles(db)
    events = await _month_events(db, first_day)
    entries = build_ledger(profiles, events, get_timezone())

    return LedgerResponse(
        month=first_day.strftime("%Y-%m"),
        entries=entries,
        total_hours=sum_hours(e.total_hours for e in entries),
        total_gross_wage=sum(e.gross_wage for e in entries),
        total_tax=sum(e.tax for e in entries),
    )


@router.get(
    "/ledger",
    response_model=LedgerResponse,
    summary="Wage ledger: hours, gross wage and withholding tax per staff member",
)
async def get_ledger(
    first_day: date = Depends(month_param),
    db: AsyncSession = Depends(get_db),
) -> LedgerResponse:
    return await _ledger(db, first_day)


@router.get(
    "/payslips",
    response_model=list[Payslip],
    summary="Itemised payslips for the selected staff (all non-admin staff by default)",
)
async def get_payslips(
    first_day: date = Depends(month_param),
    ids: str | None = Query(default=None, description="Comma-separated staff ids"),
    db: AsyncSession = Depends(get_db),
) -> list[Payslip]:
    staff_ids = _parse_ids(ids)
    profiles = await repository.fetch_staff_profiles(db, staff_ids)
    events = await _month_events(db, first_day, [p.id for p in profiles])
    return build_payslips(profiles, events, get_timezone(), first_day.strftime("%Y-%m"))


@router.get(
    "/export.csv",
    summary="Wage ledger as CSV (UTF-8 with BOM)",
)
async def export_csv(
    first_day: date = Depends(month_param),
    db: AsyncSession = Depends(get_db),
) -> Response:
    ledger = await _ledger(db, first_day)
    logger.info("Exporting ledger CSV for %s (%d rows)", ledger.month, len(ledger.entries))
    return Response(
        content=ledger_to_csv(ledger.entries),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="ledger_{ledger.month}.csv"'},
    )


@router.get(
    "/export.xlsx",
    summary="Wage ledger as an Excel workbook",
)
async def export_xlsx(
    first_day: date = Depends(month_param),
    db: AsyncSession = Depends(get_db),
) -> Response:
    ledger = await _ledger(db, first_day)
    logger.info("Exporting ledger XLSX for %s (%d rows)", ledger.month, len(ledger.entries))
    return Response(
        content=ledger_to_xlsx(ledger.entries, sheet_name=ledger.month),
        media_type=_XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="ledger_{ledger.month}.xlsx"'},
    )


@router.get(
    "/daily",
    response_model=list[DailyLaborCost],
    summary="Labour cost per local calendar day (admin)",
)
async def get_daily_costs(
    first_day: date = Depends(month_param),
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> list[DailyLaborCost]:
    profiles = await repository.fetch_staff_profiles(db)
    events = await _month_events(db, first_day)
    return daily_labor_costs(profiles, events, get_timezone())
