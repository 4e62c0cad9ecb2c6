"""Approve many payroll records at once, tolerating stale selections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID

from payroll_admin.services.errors import ErrorKind, NotFoundError, PayrollError
from payroll_admin.services.record_service import PayrollRecordService
from payroll_admin.services.results import returns_result
from payroll_admin.services.state_machine import RecordStatus
from payroll_admin.services.validation import parse_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkFailure:
    """One id the bulk operation could not apply."""

    id: str
    reason: ErrorKind
    message: str


@dataclass
class BulkApprovalResult:
    """``succeeded`` counts approvals plus already-approved/paid no-ops."""

    succeeded: int = 0
    failed: list[BulkFailure] = field(default_factory=list)
    approved_ids: list[UUID] = field(default_factory=list)
    skipped_ids: list[UUID] = field(default_factory=list)


class BulkApprovalService:
    """Applies pending → approved across a set of record ids."""

    def __init__(self, records: PayrollRecordService):
        self.records = records

    @returns_result
    async def bulk_approve(self, record_ids: Iterable[UUID | str]) -> BulkApprovalResult:
        result = BulkApprovalResult()
        emitter = self.records.emitter

        seen: set[UUID] = set()
        with emitter.batch():
            for raw_id in record_ids:
                try:
                    record_id = parse_uuid(raw_id, "record_id")
                    if record_id in seen:
                        continue
                    seen.add(record_id)
                    record = await self.records.store.get_payroll_record(record_id)
                    if record is None:
                        raise NotFoundError("payroll_record", record_id)
                except PayrollError as exc:
                    result.failed.append(BulkFailure(str(raw_id), exc.kind, exc.message))
                    continue

                if record.status in (RecordStatus.APPROVED.value, RecordStatus.PAID.value):
                    result.succeeded += 1
                    result.skipped_ids.append(record.id)
                    continue

                outcome = await self.records.approve(record.id)
                if outcome.success:
                    result.succeeded += 1
                    result.approved_ids.append(record.id)
                else:
                    result.failed.append(
                        BulkFailure(
                            str(record.id),
                            outcome.error or ErrorKind.STORE,
                            outcome.message or "",
                        )
                    )

        logger.info(
            "Bulk approval: %d succeeded (%d newly approved), %d failed",
            result.succeeded,
            len(result.approved_ids),
            len(result.failed),
        )
        return result
