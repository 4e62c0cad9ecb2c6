"""Employee roster model (read-only to the payroll core)."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from payroll_admin.models.base import Base, TimestampMixin


class EmployeeStatus(str, Enum):
    """Employee status values."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class EmploymentType(str, Enum):
    """Employment type values."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"


class EmployeeRole(str, Enum):
    """Role classification; only ordinary employees get generated payroll."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class Employee(Base, TimestampMixin):
    """Employee record."""

    __tablename__ = "employee"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    employee_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=EmployeeStatus.ACTIVE.value
    )
    salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    employment_type: Mapped[str] = mapped_column(
        String, nullable=False, default=EmploymentType.FULL_TIME.value
    )
    role: Mapped[str] = mapped_column(
        String, nullable=False, default=EmployeeRole.EMPLOYEE.value
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'terminated')",
            name="employee_status_check",
        ),
        CheckConstraint(
            "employment_type IN ('full-time', 'part-time', 'contract')",
            name="employee_employment_type_check",
        ),
        CheckConstraint("role IN ('admin', 'hr', 'employee')", name="employee_role_check"),
        CheckConstraint("salary >= 0", name="employee_salary_check"),
        CheckConstraint(
            "hourly_rate IS NULL OR hourly_rate >= 0",
            name="employee_hourly_rate_check",
        ),
    )

    @property
    def is_payroll_eligible(self) -> bool:
        """Active ordinary employees are included in bulk generation."""
        return (
            self.status == EmployeeStatus.ACTIVE.value
            and self.role == EmployeeRole.EMPLOYEE.value
        )
