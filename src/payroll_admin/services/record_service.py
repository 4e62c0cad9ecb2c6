"""Payroll record lifecycle: create, edit, approve, pay, delete."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from payroll_admin.calculators.money import PayBreakdown, compute_breakdown
from payroll_admin.config import get_settings
from payroll_admin.models import PayrollPeriod, PayrollRecord
from payroll_admin.services.errors import (
    ConflictError,
    LockedError,
    NotFoundError,
    ValidationError,
)
from payroll_admin.services.events import PAYROLL_RECORD, ChangeEmitter, ChangeNotification
from payroll_admin.services.results import returns_result
from payroll_admin.services.state_machine import (
    PayrollPeriodStateMachine,
    PayrollRecordStateMachine,
    RecordStatus,
)
from payroll_admin.services.store import Page, PayrollStore, RecordFilters
from payroll_admin.services.validation import AMOUNT_LIMITS, parse_amount, parse_uuid

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("base_salary", "overtime_hours", "overtime_rate", "bonuses", "deductions")
IMMUTABLE_FIELDS = ("employee_id", "payroll_period_id", "status")


class PayrollRecordService:
    """Service for a single payroll record's lifecycle.

    Every mutation recomputes ``overtime_amount`` and ``net_pay`` from the
    full field set, so the persisted derived values always match their
    inputs. Records in a paid period, and paid records themselves, are
    locked.
    """

    def __init__(
        self,
        store: PayrollStore,
        emitter: ChangeEmitter | None = None,
        max_overtime_hours: Decimal | None = None,
    ):
        self.store = store
        self.emitter = emitter or ChangeEmitter()
        self.max_overtime_hours = (
            max_overtime_hours
            if max_overtime_hours is not None
            else get_settings().max_overtime_hours
        )

    @returns_result
    async def create(
        self,
        employee_id: UUID | str,
        period_id: UUID | str,
        base_salary: Any,
        overtime_hours: Any = None,
        overtime_rate: Any = None,
        bonuses: Any = None,
        deductions: Any = None,
    ) -> PayrollRecord:
        """Create a pending record for one employee in one period."""
        employee_uuid = parse_uuid(employee_id, "employee_id")
        period_uuid = parse_uuid(period_id, "payroll_period_id")
        if base_salary is None:
            raise ValidationError("base_salary is required", field="base_salary")
        amounts = self._validate_amounts(
            {
                "base_salary": base_salary,
                "overtime_hours": overtime_hours,
                "overtime_rate": overtime_rate,
                "bonuses": bonuses,
                "deductions": deductions,
            }
        )

        period = await self._get_unlocked_period(period_uuid)
        if await self.store.get_employee(employee_uuid) is None:
            raise NotFoundError("employee", employee_uuid)

        existing = await self.store.find_payroll_records(
            period_id=period.id, employee_id=employee_uuid
        )
        if existing:
            raise ConflictError(
                f"Employee {employee_uuid} already has a payroll record for period {period.id}",
                {"record_id": str(existing[0].id)},
            )

        breakdown = self._compute(amounts)
        record = PayrollRecord(
            employee_id=employee_uuid,
            payroll_period_id=period.id,
            status=RecordStatus.PENDING.value,
            **breakdown.as_record_values(),
        )
        record = await self.store.insert_record(record)

        logger.info(
            "Created payroll record %s for employee %s in period %s",
            record.id,
            employee_uuid,
            period.id,
        )
        self._notify(record, "created")
        return record

    @returns_result
    async def update(self, record_id: UUID | str, **changes: Any) -> PayrollRecord:
        """Edit amounts on a record and recompute its derived totals."""
        forbidden = [name for name in changes if name in IMMUTABLE_FIELDS]
        if forbidden:
            raise ValidationError(
                f"Cannot change {', '.join(forbidden)} through update",
                field=forbidden[0],
            )
        unknown = [name for name in changes if name not in AMOUNT_FIELDS]
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(unknown)}", field=unknown[0])
        if "base_salary" in changes and changes["base_salary"] is None:
            raise ValidationError("base_salary is required", field="base_salary")
        incoming = self._validate_amounts(changes)

        record = await self._get_record(parse_uuid(record_id, "record_id"))
        await self._ensure_record_editable(record)

        merged = {name: getattr(record, name) for name in AMOUNT_FIELDS}
        merged.update(incoming)
        breakdown = self._compute(merged)

        record = await self.store.update_record(record.id, breakdown.as_record_values())
        self._notify(record, "updated")
        return record

    @returns_result
    async def approve(self, record_id: UUID | str) -> PayrollRecord:
        """pending → approved."""
        return await self._transition(record_id, RecordStatus.APPROVED.value, "approved")

    @returns_result
    async def mark_paid(self, record_id: UUID | str) -> PayrollRecord:
        """approved → paid."""
        return await self._transition(record_id, RecordStatus.PAID.value, "paid")

    @returns_result
    async def delete(self, record_id: UUID | str) -> UUID:
        """Delete a record that is neither paid nor in a paid period."""
        record = await self._get_record(parse_uuid(record_id, "record_id"))
        await self._ensure_record_editable(record)

        await self.store.delete_record(record.id)
        logger.info("Deleted payroll record %s", record.id)
        self._notify(record, "deleted")
        return record.id

    @returns_result
    async def get(self, record_id: UUID | str) -> PayrollRecord:
        return await self._get_record(parse_uuid(record_id, "record_id"))

    @returns_result
    async def list(
        self,
        filters: RecordFilters | None = None,
        page: int = 1,
        page_size: int = 20,
        sort: str = "created_at",
        direction: str = "desc",
    ) -> Page[PayrollRecord]:
        filters = filters or RecordFilters()
        if filters.status and filters.status not in {s.value for s in RecordStatus}:
            raise ValidationError(f"Unknown status '{filters.status}'", field="status")
        return await self.store.list_payroll_records(
            filters, page=page, page_size=page_size, sort=sort, direction=direction
        )

    async def _transition(
        self, record_id: UUID | str, to_status: str, action: str
    ) -> PayrollRecord:
        record = await self._get_record(parse_uuid(record_id, "record_id"))
        PayrollRecordStateMachine.validate_transition(record.status, to_status)
        await self._get_unlocked_period(record.payroll_period_id)

        record = await self.store.update_record(record.id, {"status": to_status})
        logger.info("Payroll record %s %s", record.id, action)
        self._notify(record, action)
        return record

    async def _get_record(self, record_id: UUID) -> PayrollRecord:
        record = await self.store.get_payroll_record(record_id)
        if record is None:
            raise NotFoundError("payroll_record", record_id)
        return record

    async def _get_unlocked_period(self, period_id: UUID) -> PayrollPeriod:
        period = await self.store.get_period(period_id)
        if period is None:
            raise NotFoundError("payroll_period", period_id)
        if PayrollPeriodStateMachine.is_locked(period.status):
            raise LockedError(
                f"Payroll period {period.id} is paid; its records are locked",
                {"period_id": str(period.id)},
            )
        return period

    async def _ensure_record_editable(self, record: PayrollRecord) -> None:
        if not PayrollRecordStateMachine.is_mutable(record.status):
            raise LockedError(
                f"Payroll record {record.id} is paid and cannot be changed",
                {"record_id": str(record.id)},
            )
        await self._get_unlocked_period(record.payroll_period_id)

    def _validate_amounts(self, values: dict[str, Any]) -> dict[str, Decimal]:
        validated: dict[str, Decimal] = {}
        for name, value in values.items():
            maximum = self.max_overtime_hours if name == "overtime_hours" else None
            validated[name] = parse_amount(value, name, maximum=maximum)
        return validated

    def _compute(self, amounts: dict[str, Decimal]) -> PayBreakdown:
        breakdown = compute_breakdown(**amounts)
        for name in ("overtime_amount", "net_pay"):
            if abs(getattr(breakdown, name)) > AMOUNT_LIMITS[name]:
                raise ValidationError(
                    f"{name} would exceed {AMOUNT_LIMITS[name]}", field=name
                )
        return breakdown

    def _notify(self, record: PayrollRecord, action: str) -> None:
        self.emitter.emit(
            ChangeNotification(
                entity_type=PAYROLL_RECORD,
                action=action,
                entity_id=record.id,
                period_id=record.payroll_period_id,
                employee_id=record.employee_id,
            )
        )
