from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

TaxCategory = Literal["甲", "乙"]

AnomalyFlag = Literal[
    "missing_clock_in",
    "missing_clock_out",
    "unclosed_break",
    "duplicate_break_start",
    "stray_break_end",
]


class PayItem(BaseModel):
    """Named fixed monthly amount (手当 / 控除)."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: int


class StaffWageProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    pin: str | None = None
    role: str | None = None
    hourly_wage: int = 0
    dependents: int = 0
    tax_category: TaxCategory = "甲"
    allowances: tuple[PayItem, ...] = ()
    deductions: tuple[PayItem, ...] = ()


class DailyAttendance(BaseModel):
    staff_id: UUID | None = None
    work_date: date | None = None
    first_clock_in: datetime | None = None
    last_clock_out: datetime | None = None
    gross_minutes: int = 0
    break_minutes: int = 0
    net_minutes: int = 0
    anomalies: list[AnomalyFlag] = []


class PayrollResult(BaseModel):
    total_minutes: int
    total_hours: float
    gross_wage: int
    allowance_items: list[PayItem]
    total_allowances: int
    deduction_items: list[PayItem]
    total_deductions: int
    taxable_amount: int
    tax: int
    net_pay: int


class StaffPeriodSummary(BaseModel):
    staff_id: UUID
    name: str
    pin: str | None
    role: str | None
    hourly_wage: int
    total_minutes: int
    total_hours: float
    gross_wage: int
    tax: int
    net_pay: int
    worked_days: int


class LedgerResponse(BaseModel):
    month: str
    entries: list[StaffPeriodSummary]
    # sum of the per-row 2-decimal hours, so the totals line matches the printed rows
    total_hours: float
    total_gross_wage: int
    total_tax: int


class Payslip(BaseModel):
    staff_id: UUID
    name: str
    pin: str | None
    month: str
    payroll: PayrollResult


class AttendanceDetail(BaseModel):
    staff_id: UUID
    name: str
    month: str
    days: list[DailyAttendance]
    total_minutes: int
    total_hours: float


class DailyLaborCost(BaseModel):
    work_date: date
    staff_count: int
    total_minutes: int
    total_cost: int
