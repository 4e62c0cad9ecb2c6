"""Pay arithmetic with fixed two-place decimal precision.

All amounts are ``Decimal`` quantized to cents with ROUND_HALF_UP. Floats
are converted through ``str`` so binary drift never enters a total.

Negative inputs are a caller error: these functions neither clamp nor
reject them. Net pay may legitimately come out negative when deductions
exceed gross.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

Amount = Decimal | int | float | str


def to_decimal(value: Amount | None) -> Decimal:
    """Parse a numeric value into a cent-quantized Decimal.

    ``None`` is treated as zero. Raises ValueError for anything that is not
    a finite number or has too many digits to hold at cent precision.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a number: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    try:
        return round_to_cents(amount)
    except InvalidOperation as exc:
        # More digits than the decimal context can hold at cent precision
        raise ValueError(f"Out of range: {value!r}") from exc


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def overtime_amount(hours: Decimal, rate: Decimal) -> Decimal:
    """Overtime pay: hours × rate."""
    return round_to_cents(hours * rate)


def gross_pay(base: Decimal, overtime: Decimal, bonuses: Decimal) -> Decimal:
    """Gross pay: base + overtime + bonuses."""
    return round_to_cents(base + overtime + bonuses)


def net_pay(gross: Decimal, deductions: Decimal) -> Decimal:
    """Net pay: gross − deductions. Not clamped at zero."""
    return round_to_cents(gross - deductions)


@dataclass(frozen=True)
class PayBreakdown:
    """Every input and derived amount for one payroll record."""

    base_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_amount: Decimal
    bonuses: Decimal
    deductions: Decimal
    gross_pay: Decimal
    net_pay: Decimal

    def as_record_values(self) -> dict[str, Decimal]:
        """Persisted record columns (gross is derived, not stored)."""
        return {
            "base_salary": self.base_salary,
            "overtime_hours": self.overtime_hours,
            "overtime_rate": self.overtime_rate,
            "overtime_amount": self.overtime_amount,
            "bonuses": self.bonuses,
            "deductions": self.deductions,
            "net_pay": self.net_pay,
        }


def compute_breakdown(
    base_salary: Amount,
    overtime_hours: Amount | None = None,
    overtime_rate: Amount | None = None,
    bonuses: Amount | None = None,
    deductions: Amount | None = None,
) -> PayBreakdown:
    """Compute overtime, gross and net from a record's input fields."""
    base = to_decimal(base_salary)
    hours = to_decimal(overtime_hours)
    rate = to_decimal(overtime_rate)
    bonus = to_decimal(bonuses)
    deduction = to_decimal(deductions)

    overtime = overtime_amount(hours, rate)
    gross = gross_pay(base, overtime, bonus)

    return PayBreakdown(
        base_salary=base,
        overtime_hours=hours,
        overtime_rate=rate,
        overtime_amount=overtime,
        bonuses=bonus,
        deductions=deduction,
        gross_pay=gross,
        net_pay=net_pay(gross, deduction),
    )
