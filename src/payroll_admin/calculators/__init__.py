"""Payroll calculations."""

from payroll_admin.calculators.money import (
    PayBreakdown,
    compute_breakdown,
    gross_pay,
    net_pay,
    overtime_amount,
    round_to_cents,
    to_decimal,
)

__all__ = [
    "PayBreakdown",
    "compute_breakdown",
    "gross_pay",
    "net_pay",
    "overtime_amount",
    "round_to_cents",
    "to_decimal",
]
