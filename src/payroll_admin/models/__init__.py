"""ORM models."""

from payroll_admin.models.base import Base, TimestampMixin, utcnow
from payroll_admin.models.employee import (
    Employee,
    EmployeeRole,
    EmployeeStatus,
    EmploymentType,
)
from payroll_admin.models.payroll import PayrollPeriod, PayrollRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Employee",
    "EmployeeRole",
    "EmployeeStatus",
    "EmploymentType",
    "PayrollPeriod",
    "PayrollRecord",
]
