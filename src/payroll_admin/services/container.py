"""Wiring of the payroll services around one store and one identity."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from payroll_admin.services.bulk_approval import BulkApprovalService
from payroll_admin.services.events import ChangeEmitter
from payroll_admin.services.generator import PayrollRecordGenerator
from payroll_admin.services.identity import IdentityProvider
from payroll_admin.services.period_service import PayrollPeriodService
from payroll_admin.services.record_service import PayrollRecordService
from payroll_admin.services.store import PayrollStore


@dataclass
class PayrollServices:
    """Every payroll operation, sharing one store and one change emitter."""

    periods: PayrollPeriodService
    records: PayrollRecordService
    generator: PayrollRecordGenerator
    bulk: BulkApprovalService

    @classmethod
    def build(
        cls,
        store: PayrollStore,
        identity: IdentityProvider,
        emitter: ChangeEmitter | None = None,
        max_overtime_hours: Decimal | None = None,
    ) -> PayrollServices:
        emitter = emitter or ChangeEmitter()
        records = PayrollRecordService(store, emitter, max_overtime_hours=max_overtime_hours)
        return cls(
            periods=PayrollPeriodService(store, identity, emitter),
            records=records,
            generator=PayrollRecordGenerator(store, emitter),
            bulk=BulkApprovalService(records),
        )
