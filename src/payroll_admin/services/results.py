"""Discriminated operation results returned by every payroll service call."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, ParamSpec, TypeVar

from payroll_admin.services.errors import ErrorKind, PayrollError

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Either ``success=True`` with ``data`` or ``success=False`` with an error.

    Check ``success`` before reading ``data``.
    """

    success: bool
    data: T | None = None
    error: ErrorKind | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T) -> OperationResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, exc: PayrollError) -> OperationResult[T]:
        return cls(
            success=False,
            error=exc.kind,
            message=exc.message,
            details=exc.details,
        )

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {
            "success": False,
            "error": self.error.value if self.error else None,
            "message": self.message,
            "details": self.details,
        }


def returns_result(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[OperationResult[T]]]:
    """Wrap an async operation so payroll errors become failed results."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> OperationResult[T]:
        try:
            data = await func(*args, **kwargs)
        except PayrollError as exc:
            log = logger.warning if exc.kind == ErrorKind.STORE else logger.info
            log("%s failed (%s): %s", func.__qualname__, exc.kind.value, exc.message)
            return OperationResult.fail(exc)
        return OperationResult.ok(data)

    return wrapper
