"""Bulk generation of missing payroll records for a period."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from payroll_admin.calculators.money import compute_breakdown
from payroll_admin.models import EmployeeRole, EmployeeStatus, PayrollRecord
from payroll_admin.services.errors import (
    ErrorKind,
    LockedError,
    NotFoundError,
    PartialFailureError,
)
from payroll_admin.services.events import PAYROLL_RECORD, ChangeEmitter, ChangeNotification
from payroll_admin.services.results import returns_result
from payroll_admin.services.state_machine import PayrollPeriodStateMachine, RecordStatus
from payroll_admin.services.store import PayrollStore
from payroll_admin.services.validation import parse_uuid

logger = logging.getLogger(__name__)

NOTHING_TO_GENERATE = "All active employees already have payroll records for this period"


@dataclass
class GenerationResult:
    """Outcome of a generation run.

    ``skipped_employee_ids`` are employees whose record was inserted by a
    concurrent run between our read and our insert.
    """

    period_id: UUID
    created: int
    records: list[PayrollRecord] = field(default_factory=list)
    skipped_employee_ids: list[UUID] = field(default_factory=list)
    nothing_to_generate: bool = False
    message: str = ""


class PayrollRecordGenerator:
    """Creates one pending record per eligible employee lacking one.

    Generation is additive only: it never overwrites or duplicates, so a
    second run for the same period creates nothing.
    """

    def __init__(self, store: PayrollStore, emitter: ChangeEmitter | None = None):
        self.store = store
        self.emitter = emitter or ChangeEmitter()

    @returns_result
    async def generate(self, period_id: UUID | str) -> GenerationResult:
        """Generate missing records for every active ordinary employee."""
        period_uuid = parse_uuid(period_id, "payroll_period_id")
        period = await self.store.get_period(period_uuid)
        if period is None:
            raise NotFoundError("payroll_period", period_uuid)
        if PayrollPeriodStateMachine.is_locked(period.status):
            raise LockedError(
                f"Payroll period {period.id} is paid; records cannot be generated",
                {"period_id": str(period.id)},
            )

        employees = await self.store.find_employees(
            status=EmployeeStatus.ACTIVE.value, role=EmployeeRole.EMPLOYEE.value
        )
        existing = await self.store.find_payroll_records(period_id=period.id)
        existing_employee_ids = {record.employee_id for record in existing}

        to_process = [
            emp
            for emp in employees
            if emp.is_payroll_eligible and emp.id not in existing_employee_ids
        ]
        if not to_process:
            logger.info("Nothing to generate for payroll period %s", period.id)
            return GenerationResult(
                period_id=period.id,
                created=0,
                nothing_to_generate=True,
                message=NOTHING_TO_GENERATE,
            )

        records = []
        for employee in to_process:
            breakdown = compute_breakdown(
                base_salary=employee.salary,
                overtime_rate=employee.hourly_rate or Decimal("0"),
            )
            records.append(
                PayrollRecord(
                    employee_id=employee.id,
                    payroll_period_id=period.id,
                    status=RecordStatus.PENDING.value,
                    **breakdown.as_record_values(),
                )
            )

        batch = await self.store.insert_records(records)

        skipped = [f.input.employee_id for f in batch.failed if f.reason == ErrorKind.CONFLICT]
        failures = [f for f in batch.failed if f.reason != ErrorKind.CONFLICT]
        for employee_id in skipped:
            logger.warning(
                "Skipped employee %s in period %s: record created concurrently",
                employee_id,
                period.id,
            )

        if batch.inserted or skipped:
            self.emitter.emit(
                ChangeNotification(
                    entity_type=PAYROLL_RECORD,
                    action="generated",
                    period_id=period.id,
                )
            )

        if failures:
            logger.error(
                "Generation for period %s: %d inserted, %d failed",
                period.id,
                len(batch.inserted),
                len(failures),
            )
            raise PartialFailureError(
                f"Generated {len(batch.inserted)} payroll records; {len(failures)} failed",
                succeeded=[str(r.employee_id) for r in batch.inserted],
                failed=[
                    {
                        "employee_id": str(f.input.employee_id),
                        "reason": f.reason.value,
                        "message": f.message,
                    }
                    for f in failures
                ],
            )

        logger.info("Generated %d payroll records for period %s", len(batch.inserted), period.id)
        return GenerationResult(
            period_id=period.id,
            created=len(batch.inserted),
            records=batch.inserted,
            skipped_employee_ids=skipped,
            nothing_to_generate=not batch.inserted,
            message=(
                f"Generated {len(batch.inserted)} payroll records"
                if batch.inserted
                else NOTHING_TO_GENERATE
            ),
        )
