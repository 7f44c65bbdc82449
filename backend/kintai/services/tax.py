"""
源泉所得税（月額）の計算.

甲欄: 電算機計算の特例。給与所得控除（第1表）、扶養控除（第2表）、
基礎控除（第3表）を差し引いた課税給与所得金額に第4表の税率を適用し、
10円未満を四捨五入する。
乙欄: 扶養親族等の数に関係なく、給与額そのものに乙欄の税率を適用し、
1円未満を切り捨てる。

Both schedules are expressed as bracket rows ``(lower, upper, base, rate)``:
tax = base + rate * (amount - lower) for lower <= amount < upper. The last
row of each table is open-ended and extrapolates with its marginal rate.
"""

from __future__ import annotations

import math
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import NamedTuple

PRIMARY = "甲"
SECONDARY = "乙"

DEPENDENT_DEDUCTION = Decimal(31667)


class TaxBracket(NamedTuple):
    lower: Decimal
    upper: Decimal | None
    base: Decimal
    rate: Decimal


def _progressive(rows: tuple[tuple[int | None, str], ...]) -> tuple[TaxBracket, ...]:
    """
    Build a continuous bracket table from ``(upper, rate)`` rows.

    Each row's base is the tax accumulated at its lower bound, so the
    schedule has no downward steps at bracket edges.
    """
    brackets: list[TaxBracket] = []
    lower = Decimal(0)
    base = Decimal(0)
    for upper, rate in rows:
        r = Decimal(rate)
        hi = Decimal(upper) if upper is not None else None
        brackets.append(TaxBracket(lower=lower, upper=hi, base=base, rate=r))
        if hi is not None:
            base += r * (hi - lower)
            lower = hi
    return tuple(brackets)


# 第4表: 課税給与所得金額に対する税率（復興特別所得税を含む）
PRIMARY_BRACKETS: tuple[TaxBracket, ...] = _progressive(
    (
        (162_500, "0.05105"),
        (275_000, "0.10210"),
        (579_166, "0.20420"),
        (750_000, "0.23483"),
        (1_500_000, "0.33693"),
        (None, "0.40838"),
    )
)

# 乙欄: 給与額に対する税額
SECONDARY_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal(0), Decimal(105_000), Decimal(0), Decimal("0.03063")),
    TaxBracket(Decimal(105_000), Decimal(740_000), Decimal("10720.5"), Decimal("0.1021")),
    TaxBracket(Decimal(740_000), Decimal(1_710_000), Decimal(259_200), Decimal("0.4084")),
    TaxBracket(Decimal(1_710_000), None, Decimal(655_400), Decimal("0.45945")),
)


def apply_brackets(amount: Decimal, brackets: tuple[TaxBracket, ...]) -> Decimal:
    if not brackets or amount < brackets[0].lower:
        return Decimal(0)
    for row in brackets:
        if row.upper is None or amount < row.upper:
            return row.base + row.rate * (amount - row.lower)
    top = brackets[-1]
    return top.base + top.rate * (amount - top.lower)


def employment_income_deduction(salary: Decimal) -> Decimal:
    """第1表: 給与所得控除の額（1円未満切り上げ）."""
    if salary <= 158_333:
        deduction = Decimal(54_167)
    elif salary <= 299_999:
        deduction = salary * Decimal("0.30") + 6_667
    elif salary <= 549_999:
        deduction = salary * Decimal("0.20") + 36_667
    elif salary <= 708_330:
        deduction = salary * Decimal("0.10") + 91_667
    else:
        deduction = Decimal(162_500)
    return Decimal(math.ceil(deduction))


def basic_deduction(salary: Decimal) -> Decimal:
    """第3表: 基礎控除の額."""
    if salary <= 450_000:
        return Decimal(48_000)
    if salary <= 462_500:
        return Decimal(32_000)
    if salary <= 475_000:
        return Decimal(16_000)
    return Decimal(0)


def taxable_income(salary: Decimal, dependents: int) -> Decimal:
    taxable = salary - (
        employment_income_deduction(salary)
        + DEPENDENT_DEDUCTION * max(dependents, 0)
        + basic_deduction(salary)
    )
    return max(taxable, Decimal(0))


def _primary_tax(salary: Decimal, dependents: int) -> int:
    tax = apply_brackets(taxable_income(salary, dependents), PRIMARY_BRACKETS)
    return int(tax.quantize(Decimal("1E1"), rounding=ROUND_HALF_UP))


def _secondary_tax(salary: Decimal) -> int:
    tax = apply_brackets(salary, SECONDARY_BRACKETS)
    return int(tax.to_integral_value(rounding=ROUND_FLOOR))


def income_tax(gross_pay: int, dependents: int, tax_category: str | None = PRIMARY) -> int:
    """
    Withheld income tax for one month.

    ``tax_category`` is ``"甲"`` or ``"乙"``; ``None`` or any other value is
    treated as ``"甲"``. Dependents only affect the primary schedule.
    """
    if gross_pay <= 0:
        return 0
    salary = Decimal(gross_pay)
    if tax_category == SECONDARY:
        tax = _secondary_tax(salary)
    else:
        tax = _primary_tax(salary, dependents)
    return max(tax, 0)
