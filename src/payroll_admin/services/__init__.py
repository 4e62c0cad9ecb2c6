"""Payroll admin services."""

from payroll_admin.services.bulk_approval import BulkApprovalResult, BulkApprovalService, BulkFailure
from payroll_admin.services.container import PayrollServices
from payroll_admin.services.errors import (
    ConflictError,
    ErrorKind,
    InvalidTransitionError,
    LockedError,
    NotFoundError,
    PartialFailureError,
    PayrollError,
    StoreError,
    ValidationError,
)
from payroll_admin.services.events import ChangeEmitter, ChangeNotification
from payroll_admin.services.generator import GenerationResult, PayrollRecordGenerator
from payroll_admin.services.identity import Identity, IdentityProvider, StaticIdentityProvider
from payroll_admin.services.period_service import PayrollPeriodService
from payroll_admin.services.permissions import Action, can_perform
from payroll_admin.services.record_service import PayrollRecordService
from payroll_admin.services.results import OperationResult
from payroll_admin.services.state_machine import (
    PayFrequency,
    PayrollPeriodStateMachine,
    PayrollRecordStateMachine,
    PeriodStatus,
    RecordStatus,
)
from payroll_admin.services.store import PayrollStore, RecordFilters, SqlAlchemyPayrollStore

__all__ = [
    "Action",
    "BulkApprovalResult",
    "BulkApprovalService",
    "BulkFailure",
    "ChangeEmitter",
    "ChangeNotification",
    "ConflictError",
    "ErrorKind",
    "GenerationResult",
    "Identity",
    "IdentityProvider",
    "InvalidTransitionError",
    "LockedError",
    "NotFoundError",
    "OperationResult",
    "PartialFailureError",
    "PayFrequency",
    "PayrollError",
    "PayrollPeriodService",
    "PayrollPeriodStateMachine",
    "PayrollRecordGenerator",
    "PayrollRecordService",
    "PayrollRecordStateMachine",
    "PayrollServices",
    "PayrollStore",
    "PeriodStatus",
    "RecordFilters",
    "RecordStatus",
    "SqlAlchemyPayrollStore",
    "StaticIdentityProvider",
    "StoreError",
    "ValidationError",
    "can_perform",
]
