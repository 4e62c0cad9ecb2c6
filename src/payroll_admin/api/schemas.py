"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Failed operation."""

    success: bool = False
    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Payroll Period schemas
# ============================================================================


class PayrollPeriodCreate(BaseModel):
    """Schema for creating a payroll period."""

    name: str
    start_date: date
    end_date: date
    frequency: str = "monthly"
    description: str | None = None


class PayrollPeriodUpdate(BaseModel):
    """Partial update; only provided fields are applied."""

    name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    frequency: str | None = None
    description: str | None = None
    status: str | None = None


class PayrollPeriodResponse(BaseModel):
    """Schema for payroll period response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    start_date: date
    end_date: date
    frequency: str
    status: str
    total_gross: Decimal
    total_net: Decimal
    description: str | None = None
    processed_at: datetime | None = None
    approved_at: datetime | None = None
    created_by: UUID | None = None
    approved_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class PayrollPeriodListResponse(BaseModel):
    """Schema for listing payroll periods."""

    items: list[PayrollPeriodResponse]
    total: int
    page: int
    page_size: int


class PeriodDeleteResponse(BaseModel):
    """Schema for a deleted payroll period."""

    id: UUID
    deleted: bool = True


# ============================================================================
# Payroll Record schemas
# ============================================================================


class PayrollRecordCreate(BaseModel):
    """Schema for creating a payroll record."""

    employee_id: str
    payroll_period_id: str
    base_salary: Decimal | None = None
    overtime_hours: Decimal | None = None
    overtime_rate: Decimal | None = None
    bonuses: Decimal | None = None
    deductions: Decimal | None = None


class PayrollRecordUpdate(BaseModel):
    """Partial update of a record's amounts."""

    model_config = ConfigDict(extra="allow")

    base_salary: Decimal | None = None
    overtime_hours: Decimal | None = None
    overtime_rate: Decimal | None = None
    bonuses: Decimal | None = None
    deductions: Decimal | None = None


class PayrollRecordResponse(BaseModel):
    """Schema for payroll record response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    payroll_period_id: UUID
    base_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_amount: Decimal
    bonuses: Decimal
    deductions: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    status: str
    created_at: datetime
    updated_at: datetime


class PayrollRecordListResponse(BaseModel):
    """Schema for listing payroll records."""

    items: list[PayrollRecordResponse]
    total: int
    page: int
    page_size: int


class RecordDeleteResponse(BaseModel):
    """Schema for a deleted payroll record."""

    id: UUID
    deleted: bool = True


class GenerateResponse(BaseModel):
    """Schema for record generation."""

    period_id: UUID
    created: int
    nothing_to_generate: bool
    message: str
    skipped_employee_ids: list[UUID] = Field(default_factory=list)
    records: list[PayrollRecordResponse] = Field(default_factory=list)


class BulkApproveRequest(BaseModel):
    """Schema for bulk approval."""

    record_ids: list[str] = Field(min_length=1)


class BulkFailureResponse(BaseModel):
    """One id that could not be approved."""

    id: str
    reason: str
    message: str


class BulkApproveResponse(BaseModel):
    """Schema for bulk approval response."""

    succeeded: int
    failed: list[BulkFailureResponse]
    approved_ids: list[UUID]
    skipped_ids: list[UUID]
