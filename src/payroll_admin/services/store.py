"""Data store contract for the payroll core and its SQLAlchemy implementation.

Services depend only on ``PayrollStore``. ``SqlAlchemyPayrollStore`` flushes
but never commits: the caller owns the transaction. Every write runs inside
a SAVEPOINT so a failed row never poisons the surrounding transaction,
which is what lets batch inserts report per-row failures.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Awaitable, Callable, Generic, ParamSpec, Protocol, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.models import Employee, PayrollPeriod, PayrollRecord
from payroll_admin.services.errors import (
    ConflictError,
    ErrorKind,
    NotFoundError,
    PayrollError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")

MAX_PAGE_SIZE = 100

RECORD_SORT_COLUMNS = {
    "created_at": PayrollRecord.created_at,
    "updated_at": PayrollRecord.updated_at,
    "net_pay": PayrollRecord.net_pay,
    "base_salary": PayrollRecord.base_salary,
    "status": PayrollRecord.status,
}


@dataclass(frozen=True)
class RecordFilters:
    """Filters for payroll record listings."""

    period_id: UUID | None = None
    employee_id: UUID | None = None
    status: str | None = None
    min_net_pay: Decimal | None = None
    max_net_pay: Decimal | None = None


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int
    page: int
    page_size: int


@dataclass(frozen=True)
class FailedInsert:
    """A row a batch insert could not persist."""

    input: PayrollRecord
    reason: ErrorKind
    message: str


@dataclass
class BatchInsertResult:
    """Outcome of a batch insert: rows are independent of each other."""

    inserted: list[PayrollRecord] = field(default_factory=list)
    failed: list[FailedInsert] = field(default_factory=list)


class PayrollStore(Protocol):
    """CRUD and filtered queries the payroll core needs from storage."""

    async def get_employee(self, employee_id: UUID) -> Employee | None: ...

    async def find_employees(
        self, status: str | None = None, role: str | None = None
    ) -> list[Employee]: ...

    async def get_payroll_record(self, record_id: UUID) -> PayrollRecord | None: ...

    async def find_payroll_records(
        self,
        period_id: UUID | None = None,
        employee_id: UUID | None = None,
        status: str | None = None,
        ids: list[UUID] | None = None,
    ) -> list[PayrollRecord]: ...

    async def list_payroll_records(
        self,
        filters: RecordFilters,
        page: int = 1,
        page_size: int = 20,
        sort: str = "created_at",
        direction: str = "desc",
    ) -> Page[PayrollRecord]: ...

    async def insert_record(self, record: PayrollRecord) -> PayrollRecord: ...

    async def insert_records(self, records: list[PayrollRecord]) -> BatchInsertResult: ...

    async def update_record(self, record_id: UUID, values: dict[str, Any]) -> PayrollRecord: ...

    async def delete_record(self, record_id: UUID) -> None: ...

    async def get_period(self, period_id: UUID) -> PayrollPeriod | None: ...

    async def list_periods(
        self, status: str | None = None, page: int = 1, page_size: int = 20
    ) -> Page[PayrollPeriod]: ...

    async def insert_period(self, period: PayrollPeriod) -> PayrollPeriod: ...

    async def update_period(self, period_id: UUID, values: dict[str, Any]) -> PayrollPeriod: ...

    async def delete_period(self, period_id: UUID) -> None: ...

    async def count_records_for_period(self, period_id: UUID) -> int: ...

    async def delete_records_for_period(self, period_id: UUID) -> int: ...


def is_unique_violation(exc: IntegrityError) -> bool:
    """Distinguish uniqueness violations from other integrity failures."""
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(orig).lower()
    return "unique" in text or "duplicate key" in text


def translate_store_errors(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[T]]:
    """Turn SQLAlchemy failures into payroll errors."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except PayrollError:
            raise
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise ConflictError(
                    "Record violates a uniqueness constraint",
                    {"constraint": str(exc.orig)},
                ) from exc
            raise StoreError(f"Integrity violation: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            logger.exception("Store operation %s failed", func.__qualname__)
            raise StoreError(f"Store operation failed: {exc.__class__.__name__}") from exc

    return wrapper


def _validate_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValidationError("page must be at least 1", field="page")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValidationError(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}", field="page_size"
        )


class SqlAlchemyPayrollStore:
    """PayrollStore backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ----- Employees -----

    @translate_store_errors
    async def get_employee(self, employee_id: UUID) -> Employee | None:
        return await self.session.get(Employee, employee_id)

    @translate_store_errors
    async def find_employees(
        self, status: str | None = None, role: str | None = None
    ) -> list[Employee]:
        query = select(Employee)
        if status:
            query = query.where(Employee.status == status)
        if role:
            query = query.where(Employee.role == role)
        result = await self.session.execute(query.order_by(Employee.employee_number))
        return list(result.scalars().all())

    # ----- Payroll records -----

    @translate_store_errors
    async def get_payroll_record(self, record_id: UUID) -> PayrollRecord | None:
        return await self.session.get(PayrollRecord, record_id)

    @translate_store_errors
    async def find_payroll_records(
        self,
        period_id: UUID | None = None,
        employee_id: UUID | None = None,
        status: str | None = None,
        ids: list[UUID] | None = None,
    ) -> list[PayrollRecord]:
        query = select(PayrollRecord)
        if period_id:
            query = query.where(PayrollRecord.payroll_period_id == period_id)
        if employee_id:
            query = query.where(PayrollRecord.employee_id == employee_id)
        if status:
            query = query.where(PayrollRecord.status == status)
        if ids is not None:
            query = query.where(PayrollRecord.id.in_(ids))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @translate_store_errors
    async def list_payroll_records(
        self,
        filters: RecordFilters,
        page: int = 1,
        page_size: int = 20,
        sort: str = "created_at",
        direction: str = "desc",
    ) -> Page[PayrollRecord]:
        _validate_paging(page, page_size)
        if sort not in RECORD_SORT_COLUMNS:
            raise ValidationError(f"Cannot sort by '{sort}'", field="sort")
        if direction not in ("asc", "desc"):
            raise ValidationError("direction must be 'asc' or 'desc'", field="direction")

        query = select(PayrollRecord)
        if filters.period_id:
            query = query.where(PayrollRecord.payroll_period_id == filters.period_id)
        if filters.employee_id:
            query = query.where(PayrollRecord.employee_id == filters.employee_id)
        if filters.status:
            query = query.where(PayrollRecord.status == filters.status)
        if filters.min_net_pay is not None:
            query = query.where(PayrollRecord.net_pay >= filters.min_net_pay)
        if filters.max_net_pay is not None:
            query = query.where(PayrollRecord.net_pay <= filters.max_net_pay)

        count_query = select(func.count()).select_from(query.subquery())
        total = await self.session.scalar(count_query) or 0

        column = RECORD_SORT_COLUMNS[sort]
        query = query.order_by(column.asc() if direction == "asc" else column.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await self.session.execute(query)
        return Page(
            items=list(result.scalars().all()),
            total=total,
            page=page,
            page_size=page_size,
        )

    @translate_store_errors
    async def insert_record(self, record: PayrollRecord) -> PayrollRecord:
        async with self.session.begin_nested():
            self.session.add(record)
        return record

    async def insert_records(self, records: list[PayrollRecord]) -> BatchInsertResult:
        """Insert each row in its own savepoint and report per-row outcomes."""
        result = BatchInsertResult()
        for record in records:
            try:
                await self.insert_record(record)
            except PayrollError as exc:
                result.failed.append(
                    FailedInsert(input=record, reason=exc.kind, message=exc.message)
                )
            else:
                result.inserted.append(record)
        return result

    @translate_store_errors
    async def update_record(self, record_id: UUID, values: dict[str, Any]) -> PayrollRecord:
        record = await self.session.get(PayrollRecord, record_id)
        if record is None:
            raise NotFoundError("payroll_record", record_id)
        async with self.session.begin_nested():
            for key, value in values.items():
                setattr(record, key, value)
        return record

    @translate_store_errors
    async def delete_record(self, record_id: UUID) -> None:
        record = await self.session.get(PayrollRecord, record_id)
        if record is None:
            raise NotFoundError("payroll_record", record_id)
        async with self.session.begin_nested():
            await self.session.delete(record)

    # ----- Payroll periods -----

    @translate_store_errors
    async def get_period(self, period_id: UUID) -> PayrollPeriod | None:
        return await self.session.get(PayrollPeriod, period_id)

    @translate_store_errors
    async def list_periods(
        self, status: str | None = None, page: int = 1, page_size: int = 20
    ) -> Page[PayrollPeriod]:
        _validate_paging(page, page_size)
        query = select(PayrollPeriod)
        if status:
            query = query.where(PayrollPeriod.status == status)

        count_query = select(func.count()).select_from(query.subquery())
        total = await self.session.scalar(count_query) or 0

        query = query.order_by(PayrollPeriod.start_date.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)
        result = await self.session.execute(query)
        return Page(
            items=list(result.scalars().all()),
            total=total,
            page=page,
            page_size=page_size,
        )

    @translate_store_errors
    async def insert_period(self, period: PayrollPeriod) -> PayrollPeriod:
        async with self.session.begin_nested():
            self.session.add(period)
        return period

    @translate_store_errors
    async def update_period(self, period_id: UUID, values: dict[str, Any]) -> PayrollPeriod:
        period = await self.session.get(PayrollPeriod, period_id)
        if period is None:
            raise NotFoundError("payroll_period", period_id)
        async with self.session.begin_nested():
            for key, value in values.items():
                setattr(period, key, value)
        return period

    @translate_store_errors
    async def delete_period(self, period_id: UUID) -> None:
        period = await self.session.get(PayrollPeriod, period_id)
        if period is None:
            raise NotFoundError("payroll_period", period_id)
        async with self.session.begin_nested():
            await self.session.delete(period)

    @translate_store_errors
    async def count_records_for_period(self, period_id: UUID) -> int:
        count = await self.session.scalar(
            select(func.count())
            .select_from(PayrollRecord)
            .where(PayrollRecord.payroll_period_id == period_id)
        )
        return count or 0

    @translate_store_errors
    async def delete_records_for_period(self, period_id: UUID) -> int:
        async with self.session.begin_nested():
            result = await self.session.execute(
                delete(PayrollRecord)
                .where(PayrollRecord.payroll_period_id == period_id)
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount or 0
