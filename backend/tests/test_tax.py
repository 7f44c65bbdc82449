"""
Monthly withholding tax (源泉所得税).

Covers:
- 甲 schedule: deductions, dependents, rounding to 10 yen
- 乙 schedule: flat brackets on the salary, dependents ignored
- monotonicity and category fallback
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from kintai.services.tax import (
    PRIMARY_BRACKETS,
    apply_brackets,
    basic_deduction,
    employment_income_deduction,
    income_tax,
    taxable_income,
)


class TestDeductions:
    @pytest.mark.parametrize(
        "salary, expected",
        [
            (100_000, 54_167),
            (158_333, 54_167),
            (200_000, 66_667),
            (400_000, 116_667),
            (600_000, 151_667),
            (800_000, 162_500),
        ],
    )
    def test_employment_income_deduction(self, salary, expected):
        assert employment_income_deduction(Decimal(salary)) == expected

    def test_employment_income_deduction_rounds_up(self):
        # 158_334 * 0.3 + 6_667 = 54_167.2
        assert employment_income_deduction(Decimal(158_334)) == 54_168

    @pytest.mark.parametrize(
        "salary, expected",
        [(300_000, 48_000), (450_000, 48_000), (460_000, 32_000), (470_000, 16_000), (500_000, 0)],
    )
    def test_basic_deduction(self, salary, expected):
        assert basic_deduction(Decimal(salary)) == expected

    def test_taxable_income_never_negative(self):
        assert taxable_income(Decimal(50_000), 3) == 0


class TestPrimarySchedule:
    def test_low_salary_is_not_taxed(self):
        assert income_tax(88_000, 0, "甲") == 0

    def test_single_no_dependents(self):
        # 200_000 - 66_667 - 48_000 = 85_333; 85_333 * 5.105% = 4_356.2 -> 4_360
        assert income_tax(200_000, 0, "甲") == 4_360

    def test_one_dependent(self):
        # 85_333 - 31_667 = 53_666; 53_666 * 5.105% = 2_739.6 -> 2_740
        assert income_tax(200_000, 1, "甲") == 2_740

    def test_result_is_a_multiple_of_ten(self):
        for gross in range(150_000, 700_001, 12_345):
            assert income_tax(gross, 0, "甲") % 10 == 0

    def test_more_dependents_never_increase_tax(self):
        for gross in (180_000, 250_000, 400_000, 900_000):
            taxes = [income_tax(gross, n, "甲") for n in range(0, 7)]
            assert taxes == sorted(taxes, reverse=True)

    def test_tax_grows_with_salary(self):
        taxes = [income_tax(gross, 0, "甲") for gross in range(0, 2_000_001, 5_000)]
        assert taxes == sorted(taxes)

    def test_brackets_are_continuous(self):
        for previous, row in zip(PRIMARY_BRACKETS, PRIMARY_BRACKETS[1:]):
            at_edge = previous.base + previous.rate * (row.lower - previous.lower)
            assert apply_brackets(row.lower, PRIMARY_BRACKETS) == at_edge


class TestSecondarySchedule:
    def test_lowest_bracket(self):
        assert income_tax(100_000, 0, "乙") == 3_063

    def test_second_bracket(self):
        # 10_720.5 + 10.21% * 95_000 = 20_420
        assert income_tax(200_000, 0, "乙") == 20_420

    def test_fractions_are_truncated(self):
        # 1_001 * 3.063% = 30.66
        assert income_tax(1_001, 0, "乙") == 30

    def test_dependents_are_ignored(self):
        assert income_tax(200_000, 3, "乙") == income_tax(200_000, 0, "乙")

    def test_bracket_edge_uses_upper_row(self):
        assert income_tax(740_000, 0, "乙") == 259_200

    def test_secondary_taxes_more_than_primary(self):
        assert income_tax(200_000, 0, "乙") > income_tax(200_000, 0, "甲")


class TestCategoryHandling:
    def test_missing_category_falls_back_to_primary(self):
        assert income_tax(200_000, 0, None) == income_tax(200_000, 0, "甲")

    def test_unknown_category_falls_back_to_primary(self):
        assert income_tax(200_000, 0, "丙") == income_tax(200_000, 0, "甲")

    @pytest.mark.parametrize("category", ["甲", "乙"])
    def test_zero_or_negative_pay_is_not_taxed(self, category):
        assert income_tax(0, 0, category) == 0
        assert income_tax(-5_000, 0, category) == 0
