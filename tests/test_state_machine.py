"""Tests for payroll period and payroll record state machines."""

import pytest

from payroll_admin.services.errors import InvalidTransitionError
from payroll_admin.services.state_machine import (
    PayrollPeriodStateMachine,
    PayrollRecordStateMachine,
    RecordStatus,
)


class TestPayrollRecordStateMachine:
    """Test record transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # pending → approved
        assert PayrollRecordStateMachine.can_transition("pending", "approved") is True

        # approved → paid
        assert PayrollRecordStateMachine.can_transition("approved", "paid") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Can't skip approval
        assert PayrollRecordStateMachine.can_transition("pending", "paid") is False

        # No way back
        assert PayrollRecordStateMachine.can_transition("approved", "pending") is False
        assert PayrollRecordStateMachine.can_transition("paid", "approved") is False

        # Re-approving is not a transition
        assert PayrollRecordStateMachine.can_transition("approved", "approved") is False

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollRecordStateMachine.validate_transition("pending", "paid")

        assert exc_info.value.from_status == "pending"
        assert exc_info.value.to_status == "paid"

    def test_enum_members_work_as_statuses(self):
        assert PayrollRecordStateMachine.can_transition(
            RecordStatus.PENDING.value, RecordStatus.APPROVED.value
        )

    def test_is_mutable(self):
        """Pending and approved records can still be edited; paid cannot."""
        assert PayrollRecordStateMachine.is_mutable("pending") is True
        assert PayrollRecordStateMachine.is_mutable("approved") is True
        assert PayrollRecordStateMachine.is_mutable("paid") is False

    def test_paid_is_terminal(self):
        assert PayrollRecordStateMachine.get_next_statuses("paid") == []

    def test_unknown_status_has_no_transitions(self):
        assert PayrollRecordStateMachine.get_next_statuses("voided") == []


class TestPayrollPeriodStateMachine:
    """Test period transitions."""

    def test_dedicated_operations(self):
        """process and approve walk draft → processing → approved."""
        assert PayrollPeriodStateMachine.can_transition("draft", "processing") is True
        assert PayrollPeriodStateMachine.can_transition("processing", "approved") is True

        assert PayrollPeriodStateMachine.can_transition("draft", "approved") is False
        assert PayrollPeriodStateMachine.can_transition("approved", "processing") is False

    def test_update_transitions(self):
        """A generic update may move back to draft or on to paid."""
        PayrollPeriodStateMachine.validate_update_transition("draft", "processing")
        PayrollPeriodStateMachine.validate_update_transition("processing", "draft")
        PayrollPeriodStateMachine.validate_update_transition("approved", "paid")

    @pytest.mark.parametrize(
        "from_status,to_status",
        [("draft", "paid"), ("processing", "paid"), ("paid", "draft"), ("approved", "draft")],
    )
    def test_update_transition_rejections(self, from_status, to_status):
        with pytest.raises(InvalidTransitionError):
            PayrollPeriodStateMachine.validate_update_transition(from_status, to_status)

    def test_update_cannot_approve(self):
        """Approval only happens through the approve operation."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollPeriodStateMachine.validate_update_transition("processing", "approved")

        assert "approve operation" in exc_info.value.message

    def test_only_paid_is_locked(self):
        assert PayrollPeriodStateMachine.is_locked("paid") is True
        for status in ("draft", "processing", "approved"):
            assert PayrollPeriodStateMachine.is_locked(status) is False
