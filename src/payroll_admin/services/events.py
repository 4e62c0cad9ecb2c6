"""Change notifications for payroll entities.

Every mutating operation emits a ``ChangeNotification``; caching layers
subscribe and invalidate whatever they key by entity, period or employee.
The emitter knows nothing about any particular cache.

Usage:
    emitter = ChangeEmitter()
    emitter.on("payroll_record", cache.invalidate)

    with emitter.batch():
        emitter.emit(notification_1)
        emitter.emit(notification_2)
    # Both delivered when the block exits without error
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable
from uuid import UUID

from payroll_admin.models.base import utcnow

logger = logging.getLogger(__name__)

PAYROLL_PERIOD = "payroll_period"
PAYROLL_RECORD = "payroll_record"


@dataclass(frozen=True)
class ChangeNotification:
    """Something about a payroll entity changed.

    ``entity_id`` is None for collection-level changes such as generation,
    where ``period_id`` scopes what became stale.
    """

    entity_type: str
    action: str
    entity_id: UUID | None = None
    period_id: UUID | None = None
    employee_id: UUID | None = None
    occurred_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_type": self.entity_type,
            "action": self.action,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "period_id": str(self.period_id) if self.period_id else None,
            "employee_id": str(self.employee_id) if self.employee_id else None,
            "occurred_at": self.occurred_at.isoformat(),
        }


ChangeHandler = Callable[[ChangeNotification], None]


@dataclass
class HandlerRegistration:
    """Registration of a change handler."""

    handler: ChangeHandler
    entity_types: set[str] | None  # None = all entity types


# Batch open in the current async task, if any
_active_batch: ContextVar[ChangeBatch | None] = ContextVar("change_batch", default=None)


class ChangeEmitter:
    """Publishes change notifications to subscribed handlers.

    Handlers are isolated: if one fails, the rest still receive the
    notification and the failure is logged, never raised to the operation.
    One emitter is shared by every request; batching state is held per
    async task, not on the emitter.
    """

    def __init__(self) -> None:
        self._handlers: list[HandlerRegistration] = []

    def on(self, entity_type: str | list[str], handler: ChangeHandler) -> None:
        """Register handler for one or more entity types."""
        types = set(entity_type) if isinstance(entity_type, list) else {entity_type}
        self._handlers.append(HandlerRegistration(handler=handler, entity_types=types))

    def on_all(self, handler: ChangeHandler) -> None:
        """Register handler for every notification."""
        self._handlers.append(HandlerRegistration(handler=handler, entity_types=None))

    def off(self, handler: ChangeHandler) -> None:
        """Unregister a handler."""
        self._handlers = [reg for reg in self._handlers if reg.handler != handler]

    def emit(self, notification: ChangeNotification) -> list[Exception]:
        """Emit a notification to all matching handlers.

        Returns list of any exceptions raised by handlers.
        """
        batch = _active_batch.get()
        if batch is not None and batch.emitter is self:
            batch.hold(notification)
            return []

        return self._dispatch(notification)

    def _dispatch(self, notification: ChangeNotification) -> list[Exception]:
        errors: list[Exception] = []

        for reg in self._handlers:
            if reg.entity_types and notification.entity_type not in reg.entity_types:
                continue

            try:
                reg.handler(notification)
            except Exception as e:
                logger.exception(
                    "Handler %s failed for %s %s",
                    reg.handler,
                    notification.entity_type,
                    notification.action,
                )
                errors.append(e)

        return errors

    def batch(self) -> ChangeBatch:
        """Hold notifications until the context exits, then emit together.

        If the block raises, the held notifications are discarded.
        """
        return ChangeBatch(self)


class ChangeBatch:
    """Context manager for batching notifications."""

    def __init__(self, emitter: ChangeEmitter) -> None:
        self.emitter = emitter
        self._held: list[ChangeNotification] = []
        self._errors: list[Exception] = []
        self._token: Token[ChangeBatch | None] | None = None

    def hold(self, notification: ChangeNotification) -> None:
        self._held.append(notification)

    def __enter__(self) -> ChangeBatch:
        self._held = []
        self._token = _active_batch.set(self)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _active_batch.reset(self._token)
            self._token = None
        held, self._held = self._held, []
        if exc_type is not None:
            return

        for notification in held:
            self._errors.extend(self.emitter._dispatch(notification))

    @property
    def errors(self) -> list[Exception]:
        """Errors from handler execution (available after context exits)."""
        return self._errors
