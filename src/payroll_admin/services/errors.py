"""Typed error taxonomy for payroll operations.

Every error carries a machine-readable ``kind`` so callers branch on type,
never on message text. Services convert these into failed
``OperationResult`` values; they never cross the service boundary as
exceptions.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    LOCKED = "locked"
    CONFLICT = "conflict"
    PARTIAL_FAILURE = "partial_failure"
    STORE = "store_error"


class PayrollError(Exception):
    """Base class for payroll errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(PayrollError):
    """Malformed or out-of-range input, caught before any write."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, {"field": field} if field else None)


class NotFoundError(PayrollError):
    """Referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type.replace('_', ' ').capitalize()} {entity_id} not found",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class InvalidTransitionError(PayrollError):
    """Raised when an invalid state transition is attempted."""

    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(
            msg,
            {"from_status": str(from_status), "to_status": str(to_status)},
        )


class LockedError(PayrollError):
    """Operation barred because the entity or its period is paid."""

    kind = ErrorKind.LOCKED


class ConflictError(PayrollError):
    """Uniqueness violation or dependent-data conflict."""

    kind = ErrorKind.CONFLICT


class PartialFailureError(PayrollError):
    """Bulk operation where some items succeeded and some failed."""

    kind = ErrorKind.PARTIAL_FAILURE

    def __init__(
        self,
        message: str,
        succeeded: list[str],
        failed: list[dict[str, str]],
    ):
        self.succeeded = succeeded
        self.failed = failed
        super().__init__(message, {"succeeded": succeeded, "failed": failed})


class StoreError(PayrollError):
    """Unexpected failure in the underlying data store."""

    kind = ErrorKind.STORE
