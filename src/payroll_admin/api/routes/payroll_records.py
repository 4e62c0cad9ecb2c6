"""Payroll record API endpoints."""

from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from payroll_admin.api.dependencies import Services, require
from payroll_admin.api.responses import unwrap
from payroll_admin.api.schemas import (
    BulkApproveRequest,
    BulkApproveResponse,
    BulkFailureResponse,
    ErrorResponse,
    PayrollRecordCreate,
    PayrollRecordListResponse,
    PayrollRecordResponse,
    PayrollRecordUpdate,
    RecordDeleteResponse,
)
from payroll_admin.services import Action, RecordFilters

router = APIRouter(prefix="/payroll-records", tags=["payroll-records"])


# ============================================================================
# Payroll Record CRUD
# ============================================================================


@router.post(
    "",
    response_model=PayrollRecordResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Action.PAYROLL_CREATE))],
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        423: {"model": ErrorResponse},
    },
)
async def create_payroll_record(
    services: Services,
    payload: PayrollRecordCreate,
) -> PayrollRecordResponse:
    """Create a pending payroll record for one employee and period."""
    record = unwrap(
        await services.records.create(
            employee_id=payload.employee_id,
            period_id=payload.payroll_period_id,
            base_salary=payload.base_salary,
            overtime_hours=payload.overtime_hours,
            overtime_rate=payload.overtime_rate,
            bonuses=payload.bonuses,
            deductions=payload.deductions,
        )
    )
    return PayrollRecordResponse.model_validate(record)


@router.get(
    "",
    response_model=PayrollRecordListResponse,
    dependencies=[Depends(require(Action.PAYROLL_VIEW))],
)
async def list_payroll_records(
    services: Services,
    period_id: UUID | None = None,
    employee_id: UUID | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    min_net_pay: Decimal | None = None,
    max_net_pay: Decimal | None = None,
    sort: str = "created_at",
    direction: Annotated[str, Query(alias="dir")] = "desc",
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PayrollRecordListResponse:
    """List payroll records with filters, sorting and pagination."""
    filters = RecordFilters(
        period_id=period_id,
        employee_id=employee_id,
        status=None if status_filter in (None, "all") else status_filter,
        min_net_pay=min_net_pay,
        max_net_pay=max_net_pay,
    )
    result = unwrap(
        await services.records.list(
            filters, page=page, page_size=page_size, sort=sort, direction=direction
        )
    )
    return PayrollRecordListResponse(
        items=[PayrollRecordResponse.model_validate(r) for r in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.post(
    "/bulk-approve",
    response_model=BulkApproveResponse,
    dependencies=[Depends(require(Action.PAYROLL_APPROVE))],
)
async def bulk_approve_payroll_records(
    services: Services,
    payload: BulkApproveRequest,
) -> BulkApproveResponse:
    """Approve many records; bad ids are reported, not fatal."""
    result = unwrap(await services.bulk.bulk_approve(payload.record_ids))
    return BulkApproveResponse(
        succeeded=result.succeeded,
        failed=[
            BulkFailureResponse(id=f.id, reason=f.reason.value, message=f.message)
            for f in result.failed
        ],
        approved_ids=result.approved_ids,
        skipped_ids=result.skipped_ids,
    )


@router.get(
    "/{record_id}",
    response_model=PayrollRecordResponse,
    dependencies=[Depends(require(Action.PAYROLL_VIEW))],
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_record(
    services: Services,
    record_id: Annotated[UUID, Path()],
) -> PayrollRecordResponse:
    """Get a specific payroll record by ID."""
    record = unwrap(await services.records.get(record_id))
    return PayrollRecordResponse.model_validate(record)


@router.patch(
    "/{record_id}",
    response_model=PayrollRecordResponse,
    dependencies=[Depends(require(Action.PAYROLL_UPDATE))],
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
)
async def update_payroll_record(
    services: Services,
    record_id: Annotated[UUID, Path()],
    payload: PayrollRecordUpdate,
) -> PayrollRecordResponse:
    """Edit a record's amounts; derived totals are recomputed."""
    record = unwrap(
        await services.records.update(record_id, **payload.model_dump(exclude_unset=True))
    )
    return PayrollRecordResponse.model_validate(record)


@router.delete(
    "/{record_id}",
    response_model=RecordDeleteResponse,
    dependencies=[Depends(require(Action.PAYROLL_DELETE))],
    responses={404: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
)
async def delete_payroll_record(
    services: Services,
    record_id: Annotated[UUID, Path()],
) -> RecordDeleteResponse:
    """Delete a record that is not paid."""
    deleted_id = unwrap(await services.records.delete(record_id))
    return RecordDeleteResponse(id=deleted_id)


# ============================================================================
# Payroll Record State Transitions
# ============================================================================


@router.post(
    "/{record_id}/approve",
    response_model=PayrollRecordResponse,
    dependencies=[Depends(require(Action.PAYROLL_APPROVE))],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_payroll_record(
    services: Services,
    record_id: Annotated[UUID, Path()],
) -> PayrollRecordResponse:
    """Approve a pending record."""
    record = unwrap(await services.records.approve(record_id))
    return PayrollRecordResponse.model_validate(record)


@router.post(
    "/{record_id}/mark-paid",
    response_model=PayrollRecordResponse,
    dependencies=[Depends(require(Action.PAYROLL_APPROVE))],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_payroll_record_paid(
    services: Services,
    record_id: Annotated[UUID, Path()],
) -> PayrollRecordResponse:
    """Mark an approved record as paid."""
    record = unwrap(await services.records.mark_paid(record_id))
    return PayrollRecordResponse.model_validate(record)
