"""Input coercion shared by the payroll services."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from payroll_admin.calculators.money import to_decimal
from payroll_admin.services.errors import ValidationError

# Largest value each amount column can hold (Numeric(p, 2))
AMOUNT_LIMITS: dict[str, Decimal] = {
    "base_salary": Decimal("9999999999.99"),
    "overtime_hours": Decimal("9999.99"),
    "overtime_rate": Decimal("99999999.99"),
    "overtime_amount": Decimal("9999999999.99"),
    "bonuses": Decimal("9999999999.99"),
    "deductions": Decimal("9999999999.99"),
    "net_pay": Decimal("9999999999.99"),
}


def parse_uuid(value: Any, field: str) -> UUID:
    """Coerce a reference to a UUID, rejecting anything malformed."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} must be a valid UUID", field=field)
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid UUID", field=field) from exc


def parse_amount(value: Any, field: str, maximum: Decimal | None = None) -> Decimal:
    """Coerce a non-negative decimal amount.

    The amount must also fit its column: ``maximum`` is capped by
    ``AMOUNT_LIMITS`` when the field has one.
    """
    limit = AMOUNT_LIMITS.get(field)
    if limit is not None:
        maximum = limit if maximum is None else min(maximum, limit)
    try:
        amount = to_decimal(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a number", field=field) from exc
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    if maximum is not None and amount > maximum:
        raise ValidationError(f"{field} cannot exceed {maximum}", field=field)
    return amount


def parse_date(value: Any, field: str) -> date:
    """Coerce an ISO date string or date."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO date", field=field) from exc
    raise ValidationError(f"{field} must be a date", field=field)
