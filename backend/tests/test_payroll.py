"""Wage, allowance/deduction and net-pay composition."""

from __future__ import annotations

import uuid

import pytest
from conftest import punch

from kintai.schemas.payroll import PayItem, StaffWageProfile
from kintai.services.labor import daily_net_minutes
from kintai.services.payroll import (
    compute_payroll,
    gross_wage,
    hours_from_minutes,
    net_pay,
    sum_hours,
)


def _profile(**fields) -> StaffWageProfile:
    data = {"id": uuid.uuid4(), "name": "テスト 花子", "pin": "1002", "hourly_wage": 1000}
    data.update(fields)
    return StaffWageProfile(**data)


@pytest.mark.parametrize(
    "minutes, hours",
    [(480, 8.0), (125, 2.08), (1, 0.02), (0, 0.0), (90, 1.5)],
)
def test_hours_from_minutes(minutes, hours):
    assert hours_from_minutes(minutes) == hours


def test_sum_hours_adds_rounded_row_values():
    rows = [hours_from_minutes(125), hours_from_minutes(125)]
    assert rows == [2.08, 2.08]
    assert sum_hours(rows) == 4.16
    assert sum_hours([0.1, 0.2]) == 0.3
    assert sum_hours([]) == 0.0


@pytest.mark.parametrize(
    "minutes, wage, expected",
    [
        (480, 1200, 9_600),
        (480, 1100, 8_800),
        (90, 1000, 1_500),
        (61, 1000, 1_016),  # 1_016.67 floors
        (0, 1000, 0),
        (480, 0, 0),
    ],
)
def test_gross_wage(minutes, wage, expected):
    assert gross_wage(minutes, wage) == expected


def test_gross_wage_uses_exact_minutes_not_rounded_hours():
    # 125 min = 2.0833 h; rounded hours would give 2_080
    assert gross_wage(125, 1000) == 2_083


def test_net_pay_is_not_clamped():
    assert net_pay(0, 0, 1_000, 0) == -1_000


def test_compute_payroll_without_items():
    result = compute_payroll(_profile(), 9_600)  # 160 h
    assert result.gross_wage == 160_000
    assert result.total_hours == 160.0
    assert result.taxable_amount == 160_000
    assert result.net_pay == result.gross_wage - result.tax


def test_compute_payroll_with_allowances_and_deductions():
    profile = _profile(
        allowances=(PayItem(name="交通費", value=5_000),),
        deductions=(PayItem(name="寮費", value=3_000),),
    )
    result = compute_payroll(profile, 12_000)  # 200 h

    assert result.gross_wage == 200_000
    assert result.total_allowances == 5_000
    assert result.total_deductions == 3_000
    assert result.taxable_amount == 205_000
    # 205_000 - 68_167 - 48_000 = 88_833; 88_833 * 5.105% = 4_534.9 -> 4_530
    assert result.tax == 4_530
    assert result.net_pay == 200_000 + 5_000 - 3_000 - 4_530
    assert [i.name for i in result.allowance_items] == ["交通費"]


def test_compute_payroll_secondary_category():
    result = compute_payroll(_profile(tax_category="乙"), 6_000)  # 100 h
    assert result.gross_wage == 100_000
    assert result.tax == 3_063


def test_compute_payroll_no_work_only_deductions():
    profile = _profile(deductions=(PayItem(name="寮費", value=20_000),))
    result = compute_payroll(profile, 0)
    assert result.gross_wage == 0
    assert result.tax == 0
    assert result.net_pay == -20_000


def test_one_day_end_to_end():
    events = [
        punch("clock_in", "2026-10-01T09:00:00+09:00"),
        punch("break_start", "2026-10-01T12:00:00+09:00"),
        punch("break_end", "2026-10-01T13:00:00+09:00"),
        punch("clock_out", "2026-10-01T18:00:00+09:00"),
    ]
    minutes = daily_net_minutes(events)
    result = compute_payroll(_profile(hourly_wage=1100), minutes)

    assert minutes == 480
    assert result.total_hours == 8.0
    assert result.gross_wage == 8_800
    assert result.tax >= 0
    assert result.net_pay == 8_800 - result.tax
