"""Integration test fixtures: the FastAPI app over an in-memory database."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from payroll_admin.api.app import create_app
from payroll_admin.api.dependencies import get_db_session
from payroll_admin.models import Employee
from payroll_admin.services import ChangeEmitter, ChangeNotification

ADMIN_ID = UUID("a0000000-0000-4000-8000-000000000001")
HR_ID = UUID("a0000000-0000-4000-8000-000000000002")
STAFF_ID = UUID("a0000000-0000-4000-8000-000000000003")

ADMIN_HEADERS = {"X-Actor-Id": str(ADMIN_ID), "X-Actor-Role": "admin", "X-Actor-Name": "Ada"}
HR_HEADERS = {"X-Actor-Id": str(HR_ID), "X-Actor-Role": "hr", "X-Actor-Name": "Hal"}
STAFF_HEADERS = {"X-Actor-Id": str(STAFF_ID), "X-Actor-Role": "employee"}


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def change_log() -> list[ChangeNotification]:
    return []


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    change_log: list[ChangeNotification],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    emitter = ChangeEmitter()
    emitter.on_all(change_log.append)
    app = create_app(emitter)

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def roster(session_factory: async_sessionmaker[AsyncSession]) -> list[Employee]:
    """Two active ordinary employees plus an HR manager."""
    employees = [
        Employee(
            id=uuid4(),
            employee_number="E-001",
            first_name="Erin",
            last_name="One",
            salary=Decimal("3000"),
            hourly_rate=Decimal("20"),
        ),
        Employee(
            id=uuid4(),
            employee_number="E-002",
            first_name="Eli",
            last_name="Two",
            salary=Decimal("2500"),
            hourly_rate=Decimal("18"),
        ),
        Employee(
            id=uuid4(),
            employee_number="H-001",
            first_name="Hal",
            last_name="Manager",
            salary=Decimal("4000"),
            role="hr",
        ),
    ]
    async with session_factory() as session:
        session.add_all(employees)
        await session.commit()
    return employees


@pytest_asyncio.fixture
async def period_id(client: AsyncClient) -> str:
    """October 2025 period created through the API."""
    response = await client.post(
        "/api/v1/payroll-periods",
        headers=ADMIN_HEADERS,
        json={"name": "October 2025", "start_date": "2025-10-01", "end_date": "2025-10-31"},
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]
