"""
Wage, allowance/deduction and net-pay composition.

Gross wage is always computed from exact minutes (floor of minutes / 60 *
hourly wage); the 2-decimal hours value is for display and export only.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from kintai.schemas.payroll import PayItem, PayrollResult, StaffWageProfile
from kintai.services.tax import income_tax

_MINUTES_PER_HOUR = Decimal(60)
_HUNDREDTHS = Decimal("0.01")


def hours_from_minutes(minutes: int) -> float:
    """Minutes → hours, rounded half-up to 2 decimals (480 → 8.0, 125 → 2.08)."""
    hours = Decimal(minutes) / _MINUTES_PER_HOUR
    return float(hours.quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))


def sum_hours(hours: Iterable[float]) -> float:
    """Sum of already-rounded hour values, kept at 2 decimals."""
    total = sum((Decimal(str(h)) for h in hours), Decimal(0))
    return float(total.quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))


def gross_wage(minutes: int, hourly_wage: int) -> int:
    if minutes <= 0 or hourly_wage <= 0:
        return 0
    amount = Decimal(minutes) * Decimal(hourly_wage) / _MINUTES_PER_HOUR
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def net_pay(gross: int, allowances: int, deductions: int, tax: int) -> int:
    # Not clamped: a negative result is shown to the administrator as-is.
    return gross + allowances - (deductions + tax)


def sum_items(items: tuple[PayItem, ...] | list[PayItem]) -> int:
    return sum(item.value for item in items)


def compute_payroll(profile: StaffWageProfile, minutes: int) -> PayrollResult:
    wage = gross_wage(minutes, profile.hourly_wage)
    total_allowances = sum_items(profile.allowances)
    total_deductions = sum_items(profile.deductions)

    taxable = wage + total_allowances
    tax = income_tax(taxable, profile.dependents, profile.tax_category)

    return PayrollResult(
        total_minutes=minutes,
        total_hours=hours_from_minutes(minutes),
        gross_wage=wage,
        allowance_items=list(profile.allowances),
        total_allowances=total_allowances,
        deduction_items=list(profile.deductions),
        total_deductions=total_deductions,
        taxable_amount=taxable,
        tax=tax,
        net_pay=net_pay(wage, total_allowances, total_deductions, tax),
    )
