"""
Test configuration and fixtures for the loan management backend tests.
"""
import os

# Point the application engine at SQLite before any app module is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from typing import AsyncGenerator
from decimal import Decimal
from datetime import date

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.core.database import Base, get_db
from app.core.security import create_access_token
from main import app


# ============================================================
# Database Fixtures
# ============================================================

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create a fresh test database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for each test"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """Bearer token for the configured administrator"""
    token = create_access_token(data={"sub": "admin", "role": "admin", "admin_id": 1})
    return {"Authorization": f"Bearer {token}"}


# ============================================================
# Organization Fixtures
# ============================================================

@pytest.fixture
async def test_region(db_session):
    from app.modules.organization.models import Region

    region = Region(name="Central")
    db_session.add(region)
    await db_session.commit()
    await db_session.refresh(region)
    return region


@pytest.fixture
async def test_branch(db_session, test_region):
    from app.modules.organization.models import Branch

    branch = Branch(location="Main Street", region_id=test_region.id)
    db_session.add(branch)
    await db_session.commit()
    await db_session.refresh(branch)
    return branch


@pytest.fixture
async def test_staff(db_session, test_branch):
    from app.modules.organization.models import Staff

    staff = Staff(name="Asha Patel", role="Loan Officer", branch_id=test_branch.id)
    db_session.add(staff)
    await db_session.commit()
    await db_session.refresh(staff)
    return staff


# ============================================================
# Borrower & Loan Fixtures
# ============================================================

@pytest.fixture
async def test_borrower(db_session, test_region):
    from app.modules.borrowers.models import Borrower

    borrower = Borrower(
        name="Ravi Kumar",
        contact="+911234567890",
        income=Decimal("25000.00"),
        region_id=test_region.id
    )
    db_session.add(borrower)
    await db_session.commit()
    await db_session.refresh(borrower)
    return borrower


@pytest.fixture
async def pending_loan(db_session, test_borrower):
    """A Pending loan of 10,000 at 12% over 12 months"""
    from app.modules.loans.models import Loan, LoanStatus

    loan = Loan(
        borrower_id=test_borrower.id,
        amount=Decimal("10000.00"),
        interest_rate=Decimal("12.00"),
        tenure=12,
        start_date=date(2026, 1, 10),
        status=LoanStatus.PENDING
    )
    db_session.add(loan)
    await db_session.commit()
    await db_session.refresh(loan)
    return loan


@pytest.fixture
async def approver(test_staff, test_branch):
    """(staff_id, branch_id) pair used to approve loans"""
    return test_staff.id, test_branch.id
