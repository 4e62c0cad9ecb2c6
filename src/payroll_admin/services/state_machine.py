"""Payroll period and payroll record state machines."""

from __future__ import annotations

from enum import Enum

from payroll_admin.services.errors import InvalidTransitionError


class PeriodStatus(str, Enum):
    """Payroll period status values."""

    DRAFT = "draft"
    PROCESSING = "processing"
    APPROVED = "approved"
    PAID = "paid"


class RecordStatus(str, Enum):
    """Payroll record status values."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class PayFrequency(str, Enum):
    """Payroll period frequency values."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class PayrollRecordStateMachine:
    """State machine for payroll record status transitions.

    Allowed transitions:
    - pending → approved
    - approved → paid

    Paid is terminal; there is no path that skips approval.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        RecordStatus.PENDING.value: [RecordStatus.APPROVED.value],
        RecordStatus.APPROVED.value: [RecordStatus.PAID.value],
        RecordStatus.PAID.value: [],  # Terminal state
    }

    # Statuses where the record's amounts may still be edited or deleted
    MUTABLE = {
        RecordStatus.PENDING.value,
        RecordStatus.APPROVED.value,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def is_mutable(cls, status: str) -> bool:
        """Check if the record's fields can be edited in this status."""
        return status in cls.MUTABLE

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])


class PayrollPeriodStateMachine:
    """State machine for payroll period status transitions.

    Dedicated operations:
    - draft → processing (process)
    - processing → approved (approve)

    Through a generic update:
    - draft → processing
    - processing → draft
    - approved → paid

    Approval is only reachable through the dedicated operation. Once paid,
    a period is locked against every edit.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PeriodStatus.DRAFT.value: [PeriodStatus.PROCESSING.value],
        PeriodStatus.PROCESSING.value: [PeriodStatus.APPROVED.value],
        PeriodStatus.APPROVED.value: [],
        PeriodStatus.PAID.value: [],
    }

    UPDATE_TRANSITIONS: dict[str, list[str]] = {
        PeriodStatus.DRAFT.value: [PeriodStatus.PROCESSING.value],
        PeriodStatus.PROCESSING.value: [PeriodStatus.DRAFT.value],
        PeriodStatus.APPROVED.value: [PeriodStatus.PAID.value],
        PeriodStatus.PAID.value: [],
    }

    LOCKED = {PeriodStatus.PAID.value}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a dedicated-operation transition is valid."""
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def validate_update_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a status change requested through a generic update."""
        if to_status == PeriodStatus.APPROVED.value:
            raise InvalidTransitionError(
                from_status, to_status, "approval requires the approve operation"
            )
        if to_status not in cls.UPDATE_TRANSITIONS.get(from_status, []):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def is_locked(cls, status: str) -> bool:
        """Check if the period (and its records) are locked against edits."""
        return status in cls.LOCKED

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])
