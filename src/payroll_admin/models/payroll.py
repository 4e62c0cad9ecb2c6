"""Payroll period and payroll record models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from payroll_admin.models.base import Base, TimestampMixin


class PayrollPeriod(Base, TimestampMixin):
    """A bounded date range over which payroll is computed and settled."""

    __tablename__ = "payroll_period"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    frequency: Mapped[str] = mapped_column(String, nullable=False, default="monthly")
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    total_gross: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    total_net: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "frequency IN ('weekly', 'bi-weekly', 'monthly', 'quarterly')",
            name="payroll_period_frequency_check",
        ),
        CheckConstraint(
            "status IN ('draft', 'processing', 'approved', 'paid')",
            name="payroll_period_status_check",
        ),
        CheckConstraint("end_date > start_date", name="payroll_period_dates_check"),
        CheckConstraint(
            "total_gross >= 0 AND total_net >= 0",
            name="payroll_period_totals_check",
        ),
    )


class PayrollRecord(Base, TimestampMixin):
    """One employee's computed pay for one period."""

    __tablename__ = "payroll_record"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
    )
    payroll_period_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("payroll_period.id", ondelete="RESTRICT"),
        nullable=False,
    )
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False, default=Decimal("0")
    )
    overtime_rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    overtime_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    bonuses: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    deductions: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    # Not constrained to >= 0: excess deductions are surfaced as-is
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "payroll_period_id",
            name="payroll_record_employee_period_unique",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'paid')",
            name="payroll_record_status_check",
        ),
        CheckConstraint(
            "base_salary >= 0 AND overtime_hours >= 0 AND overtime_rate >= 0 "
            "AND bonuses >= 0 AND deductions >= 0",
            name="payroll_record_amounts_check",
        ),
    )

    @property
    def gross_pay(self) -> Decimal:
        """Base salary plus overtime and bonuses, before deductions."""
        return self.base_salary + self.overtime_amount + self.bonuses
