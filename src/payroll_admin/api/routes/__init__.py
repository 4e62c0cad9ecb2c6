"""API routes."""

from payroll_admin.api.routes.health import router as health_router
from payroll_admin.api.routes.payroll_periods import router as payroll_periods_router
from payroll_admin.api.routes.payroll_records import router as payroll_records_router

__all__ = ["health_router", "payroll_periods_router", "payroll_records_router"]
