"""Tests for pay arithmetic."""

from decimal import Decimal

import pytest

from payroll_admin.calculators import (
    compute_breakdown,
    gross_pay,
    net_pay,
    overtime_amount,
    round_to_cents,
    to_decimal,
)


class TestToDecimal:
    """Test parsing of amounts."""

    def test_none_is_zero(self):
        assert to_decimal(None) == Decimal("0.00")

    def test_quantizes_to_cents(self):
        assert to_decimal("12.345") == Decimal("12.35")
        assert to_decimal(7) == Decimal("7.00")

    def test_float_goes_through_str(self):
        """0.1 + 0.2 must not leak binary drift."""
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.30")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", True, [1]])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)

    @pytest.mark.parametrize("value", ["1e30", Decimal("1e26"), 10**27])
    def test_rejects_amounts_too_large_for_cents(self, value):
        """Quantizing past the context precision is a ValueError, not InvalidOperation."""
        with pytest.raises(ValueError):
            to_decimal(value)


class TestRounding:
    """Test ROUND_HALF_UP rounding to cents."""

    def test_round_half_up(self):
        assert round_to_cents(Decimal("2.345")) == Decimal("2.35")
        assert round_to_cents(Decimal("2.344")) == Decimal("2.34")
        assert round_to_cents(Decimal("-2.345")) == Decimal("-2.35")

    def test_overtime_amount_rounds_product(self):
        assert overtime_amount(Decimal("1.5"), Decimal("33.33")) == Decimal("50.00")
        assert overtime_amount(Decimal("2.25"), Decimal("10.11")) == Decimal("22.75")


class TestPayFormulas:
    """Test gross and net pay."""

    def test_gross_pay(self):
        assert gross_pay(Decimal("3000"), Decimal("100"), Decimal("100")) == Decimal("3200.00")

    def test_net_pay(self):
        assert net_pay(Decimal("3200"), Decimal("250.50")) == Decimal("2949.50")

    def test_net_pay_can_be_negative(self):
        """Deductions larger than gross are surfaced, not clamped."""
        assert net_pay(Decimal("100"), Decimal("150")) == Decimal("-50.00")


class TestComputeBreakdown:
    """Test the full record breakdown."""

    def test_defaults_missing_inputs_to_zero(self):
        breakdown = compute_breakdown(base_salary="2500")

        assert breakdown.overtime_hours == Decimal("0.00")
        assert breakdown.overtime_amount == Decimal("0.00")
        assert breakdown.gross_pay == Decimal("2500.00")
        assert breakdown.net_pay == Decimal("2500.00")

    @pytest.mark.parametrize(
        "base,hours,rate,bonuses,deductions",
        [
            ("3000", "5", "20", "100", "0"),
            ("1234.56", "7.5", "18.25", "0", "99.99"),
            ("0", "0", "0", "0", "0"),
            ("4100.10", "12.25", "31.07", "250", "1300.45"),
        ],
    )
    def test_net_pay_matches_formula_exactly(self, base, hours, rate, bonuses, deductions):
        breakdown = compute_breakdown(base, hours, rate, bonuses, deductions)

        expected_overtime = (Decimal(hours) * Decimal(rate)).quantize(Decimal("0.01"))
        assert breakdown.overtime_amount == expected_overtime
        assert breakdown.net_pay == (
            Decimal(base) + expected_overtime + Decimal(bonuses) - Decimal(deductions)
        )

    def test_record_values_exclude_gross(self):
        values = compute_breakdown("3000", "5", "20", "100").as_record_values()

        assert "gross_pay" not in values
        assert values["overtime_amount"] == Decimal("100.00")
        assert values["net_pay"] == Decimal("3200.00")
