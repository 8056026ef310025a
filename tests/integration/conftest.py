"""Shared fixtures for integration tests.

Every test gets its own in-memory SQLite database. The API is exercised
through ``httpx.ASGITransport`` with the database session and both gateways
overridden, so no network or external service is involved.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from nagarkar.api.main import create_app
from nagarkar.core.security import Principal, create_access_token, hash_password
from nagarkar.domain.enums import TaxStatus
from nagarkar.infrastructure.database import Base, get_db
from nagarkar.infrastructure.database.models import Admin, Citizen, District, TaxRecord
from nagarkar.infrastructure.gateways import (
    MockPaymentGateway,
    MockSmsClient,
    get_payment_gateway,
    get_sms_client,
)
from nagarkar.services.common import local_today

ADMIN_PASSWORD = "admin123"  # noqa: S105


@dataclass(frozen=True)
class SeedData:
    """Ids of the rows every integration test starts with."""

    admin_id: int
    central_id: int
    north_id: int
    john_id: int
    jane_id: int
    current_record_id: int
    overdue_record_id: int


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """A fresh in-memory database shared by all sessions of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A session for calling services directly, outside of any request."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]) -> SeedData:
    """Two districts, two citizens and two tax records for John.

    One of John's records is due at the end of the year and one has been
    overdue for twenty days.
    """
    today = local_today()
    async with session_factory() as session:
        admin = Admin(username="admin", password_hash=hash_password(ADMIN_PASSWORD))
        central = District(name="Central District")
        north = District(name="North District")
        session.add_all([admin, central, north])
        await session.flush()

        john = Citizen(
            customer_id="CID001001",
            name="John Doe",
            ward_no="Ward-1",
            district_id=central.id,
            city="Mumbai",
            state="Maharashtra",
            contact_no="9876543210",
        )
        jane = Citizen(
            customer_id="CID001002",
            name="Jane Smith",
            ward_no="Ward-2",
            district_id=north.id,
            city="Mumbai",
            state="Maharashtra",
            contact_no="9876543211",
            email="jane@example.com",
        )
        session.add_all([john, jane])
        await session.flush()

        current = TaxRecord(
            citizen_id=john.id,
            tax_year=today.year,
            amount=Decimal(5000),
            due_date=today + timedelta(days=120),
            status=TaxStatus.PENDING,
        )
        overdue = TaxRecord(
            citizen_id=john.id,
            tax_year=today.year - 1,
            amount=Decimal(4000),
            due_date=today - timedelta(days=20),
            status=TaxStatus.PENDING,
        )
        session.add_all([current, overdue])
        await session.flush()

        data = SeedData(
            admin_id=admin.id,
            central_id=central.id,
            north_id=north.id,
            john_id=john.id,
            jane_id=jane.id,
            current_record_id=current.id,
            overdue_record_id=overdue.id,
        )
        await session.commit()
    return data


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Application wired to the test database and deterministic gateways."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    sms = MockSmsClient(success_rate=1.0)
    gateway = MockPaymentGateway(process_success_rate=1.0, verify_success_rate=1.0)
    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_sms_client] = lambda: sms
    application.dependency_overrides[get_payment_gateway] = lambda: gateway
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers(seed: SeedData) -> dict[str, str]:
    token = create_access_token(
        Principal(role="admin", id=seed.admin_id, username="admin")
    )
    return {"Authorization": f"Bearer {token}"}


def citizen_headers(citizen_id: int, customer_id: str) -> dict[str, str]:
    token = create_access_token(
        Principal(role="citizen", id=citizen_id, customer_id=customer_id)
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def john_headers(seed: SeedData) -> dict[str, str]:
    return citizen_headers(seed.john_id, "CID001001")


@pytest.fixture
def jane_headers(seed: SeedData) -> dict[str, str]:
    return citizen_headers(seed.jane_id, "CID001002")
