"""Pytest fixtures for payroll admin tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from payroll_admin.database import create_engine
from payroll_admin.models import Base, Employee, PayrollPeriod
from payroll_admin.services import (
    ChangeEmitter,
    ChangeNotification,
    Identity,
    PayrollServices,
    SqlAlchemyPayrollStore,
    StaticIdentityProvider,
)

# In-memory SQLite; every test gets a fresh database
TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_ID = uuid4()

EmployeeFactory = Callable[..., Awaitable[Employee]]


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    engine = create_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(session: AsyncSession) -> SqlAlchemyPayrollStore:
    return SqlAlchemyPayrollStore(session)


@pytest.fixture
def admin() -> Identity:
    """The acting administrator."""
    return Identity(id=ADMIN_ID, display_name="Ada Admin", role="admin")


@pytest.fixture
def notifications() -> list[ChangeNotification]:
    return []


@pytest.fixture
def emitter(notifications: list[ChangeNotification]) -> ChangeEmitter:
    """Emitter that records every notification it delivers."""
    emitter = ChangeEmitter()
    emitter.on_all(notifications.append)
    return emitter


@pytest.fixture
def services(
    store: SqlAlchemyPayrollStore, admin: Identity, emitter: ChangeEmitter
) -> PayrollServices:
    return PayrollServices.build(
        store,
        StaticIdentityProvider(admin),
        emitter,
        max_overtime_hours=Decimal("100"),
    )


@pytest.fixture
def make_employee(session: AsyncSession) -> EmployeeFactory:
    """Factory for roster entries."""
    counter = 0

    async def _make(
        salary: str = "3000",
        hourly_rate: str | None = "20",
        status: str = "active",
        role: str = "employee",
        first_name: str = "Test",
    ) -> Employee:
        nonlocal counter
        counter += 1
        employee = Employee(
            id=uuid4(),
            employee_number=f"EMP-{counter:04d}",
            first_name=first_name,
            last_name=f"Employee{counter}",
            department="Engineering",
            position="Engineer",
            status=status,
            salary=Decimal(salary),
            hourly_rate=Decimal(hourly_rate) if hourly_rate is not None else None,
            role=role,
        )
        session.add(employee)
        await session.flush()
        return employee

    return _make


@pytest_asyncio.fixture
async def employee(make_employee: EmployeeFactory) -> Employee:
    """A single active ordinary employee."""
    return await make_employee()


@pytest_asyncio.fixture
async def period(services: PayrollServices) -> PayrollPeriod:
    """October 2025, monthly, in draft."""
    result = await services.periods.create(
        name="October 2025",
        start_date=date(2025, 10, 1),
        end_date=date(2025, 10, 31),
        frequency="monthly",
    )
    assert result.success, result.message
    return result.data


@pytest.fixture
def advance_period(services: PayrollServices) -> Callable[..., Awaitable[None]]:
    """Walk a period forward to a status through its real operations."""

    async def _advance(period_id, status: str) -> None:
        steps = {
            "draft": [],
            "processing": ["process"],
            "approved": ["process", "approve"],
            "paid": ["process", "approve", "pay"],
        }
        for step in steps[status]:
            if step == "process":
                result = await services.periods.process(period_id)
            elif step == "approve":
                result = await services.periods.approve(period_id)
            else:
                result = await services.periods.update(period_id, status="paid")
            assert result.success, result.message

    return _advance
