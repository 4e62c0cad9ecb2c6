"""Mapping of failed operation results to HTTP responses."""

from typing import Any, TypeVar

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from payroll_admin.services import ErrorKind, OperationResult

T = TypeVar("T")

STATUS_BY_ERROR: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.LOCKED: status.HTTP_423_LOCKED,
    ErrorKind.PARTIAL_FAILURE: status.HTTP_207_MULTI_STATUS,
    ErrorKind.STORE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class OperationFailed(Exception):
    """Raised inside a route to short-circuit with a failed result."""

    def __init__(self, result: OperationResult[Any]):
        self.result = result
        super().__init__(result.message)


def unwrap(result: OperationResult[T]) -> T:
    """Return the data of a successful result, or raise OperationFailed."""
    if not result.success:
        raise OperationFailed(result)
    return result.data  # type: ignore[return-value]


async def operation_failed_handler(request: Request, exc: OperationFailed) -> JSONResponse:
    """Render a failed result as ``{success: false, error, message, details}``."""
    result = exc.result
    status_code = STATUS_BY_ERROR.get(
        result.error or ErrorKind.STORE, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result.to_dict()))
