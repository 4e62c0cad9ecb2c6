"""Payroll period API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from payroll_admin.api.dependencies import Services, require
from payroll_admin.api.responses import unwrap
from payroll_admin.api.schemas import (
    ErrorResponse,
    GenerateResponse,
    PayrollPeriodCreate,
    PayrollPeriodListResponse,
    PayrollPeriodResponse,
    PayrollPeriodUpdate,
    PayrollRecordResponse,
    PeriodDeleteResponse,
)
from payroll_admin.services import Action, ErrorKind

router = APIRouter(prefix="/payroll-periods", tags=["payroll-periods"])


# ============================================================================
# Payroll Period CRUD
# ============================================================================


@router.post(
    "",
    response_model=PayrollPeriodResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Action.PAYROLL_CREATE))],
    responses={422: {"model": ErrorResponse}},
)
async def create_payroll_period(
    services: Services,
    payload: PayrollPeriodCreate,
) -> PayrollPeriodResponse:
    """Create a new payroll period in draft status."""
    period = unwrap(
        await services.periods.create(
            name=payload.name,
            start_date=payload.start_date,
            end_date=payload.end_date,
            frequency=payload.frequency,
            description=payload.description,
        )
    )
    return PayrollPeriodResponse.model_validate(period)


@router.get(
    "",
    response_model=PayrollPeriodListResponse,
    dependencies=[Depends(require(Action.PAYROLL_VIEW))],
)
async def list_payroll_periods(
    services: Services,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> PayrollPeriodListResponse:
    """List payroll periods, newest first."""
    result = unwrap(
        await services.periods.list(status=status_filter, page=page, page_size=page_size)
    )
    return PayrollPeriodListResponse(
        items=[PayrollPeriodResponse.model_validate(p) for p in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get(
    "/{period_id}",
    response_model=PayrollPeriodResponse,
    dependencies=[Depends(require(Action.PAYROLL_VIEW))],
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_period(
    services: Services,
    period_id: Annotated[UUID, Path()],
) -> PayrollPeriodResponse:
    """Get a specific payroll period by ID."""
    period = unwrap(await services.periods.get(period_id))
    return PayrollPeriodResponse.model_validate(period)


@router.patch(
    "/{period_id}",
    response_model=PayrollPeriodResponse,
    dependencies=[Depends(require(Action.PAYROLL_UPDATE))],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
)
async def update_payroll_period(
    services: Services,
    period_id: Annotated[UUID, Path()],
    payload: PayrollPeriodUpdate,
) -> PayrollPeriodResponse:
    """Edit a payroll period. Paid periods are locked."""
    period = unwrap(
        await services.periods.update(period_id, **payload.model_dump(exclude_unset=True))
    )
    return PayrollPeriodResponse.model_validate(period)


@router.delete(
    "/{period_id}",
    response_model=PeriodDeleteResponse,
    dependencies=[Depends(require(Action.PAYROLL_DELETE))],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
)
async def delete_payroll_period(
    services: Services,
    period_id: Annotated[UUID, Path()],
    cascade: bool = False,
) -> PeriodDeleteResponse:
    """Delete a payroll period; records are removed only with ``cascade=true``."""
    deleted_id = unwrap(await services.periods.delete(period_id, cascade=cascade))
    return PeriodDeleteResponse(id=deleted_id)


# ============================================================================
# Payroll Period State Transitions
# ============================================================================


@router.post(
    "/{period_id}/process",
    response_model=PayrollPeriodResponse,
    dependencies=[Depends(require(Action.PAYROLL_UPDATE))],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def process_payroll_period(
    services: Services,
    period_id: Annotated[UUID, Path()],
) -> PayrollPeriodResponse:
    """Start processing a draft period."""
    period = unwrap(await services.periods.process(period_id))
    return PayrollPeriodResponse.model_validate(period)


@router.post(
    "/{period_id}/approve",
    response_model=PayrollPeriodResponse,
    dependencies=[Depends(require(Action.PAYROLL_APPROVE))],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_payroll_period(
    services: Services,
    period_id: Annotated[UUID, Path()],
) -> PayrollPeriodResponse:
    """Approve a period that is processing."""
    period = unwrap(await services.periods.approve(period_id))
    return PayrollPeriodResponse.model_validate(period)


@router.post(
    "/{period_id}/generate-records",
    response_model=GenerateResponse,
    dependencies=[Depends(require(Action.PAYROLL_CREATE))],
    responses={
        207: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        423: {"model": ErrorResponse},
    },
)
async def generate_payroll_records(
    services: Services,
    period_id: Annotated[UUID, Path()],
) -> GenerateResponse | JSONResponse:
    """Create pending records for active employees missing one in this period."""
    result = await services.generator.generate(period_id)
    if result.error == ErrorKind.PARTIAL_FAILURE:
        # Rows that made it in are kept, so respond without unwinding the session
        return JSONResponse(
            status_code=status.HTTP_207_MULTI_STATUS,
            content=jsonable_encoder(result.to_dict()),
        )

    generated = unwrap(result)
    return GenerateResponse(
        period_id=generated.period_id,
        created=generated.created,
        nothing_to_generate=generated.nothing_to_generate,
        message=generated.message,
        skipped_employee_ids=generated.skipped_employee_ids,
        records=[PayrollRecordResponse.model_validate(r) for r in generated.records],
    )
