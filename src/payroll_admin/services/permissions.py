"""Role-based capability checks, consulted once at the controller boundary.

Services assume their caller is already authorized.
"""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """Payroll actions subject to authorization."""

    PAYROLL_VIEW = "payroll:view"
    PAYROLL_CREATE = "payroll:create"
    PAYROLL_UPDATE = "payroll:update"
    PAYROLL_APPROVE = "payroll:approve"
    PAYROLL_DELETE = "payroll:delete"


PERMISSIONS: dict[str, frozenset[str]] = {
    Action.PAYROLL_VIEW.value: frozenset({"admin", "hr", "employee"}),
    Action.PAYROLL_CREATE.value: frozenset({"admin", "hr"}),
    Action.PAYROLL_UPDATE.value: frozenset({"admin", "hr"}),
    Action.PAYROLL_APPROVE.value: frozenset({"admin"}),
    Action.PAYROLL_DELETE.value: frozenset({"admin"}),
}


def can_perform(actor_role: str | None, action: Action | str) -> bool:
    """Check whether a role may perform an action. Unknown actions are denied."""
    if not actor_role:
        return False
    key = action.value if isinstance(action, Action) else action
    return actor_role in PERMISSIONS.get(key, frozenset())
