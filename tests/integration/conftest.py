"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Mock venue data client with generated payment histories
- In-memory database for testing
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.dependencies import (
    get_assessment_repository,
    get_offer_repository,
    get_venue_client,
)
from src.domain.entities import Venue, utcnow
from src.domain.exceptions import (
    VenueDataException,
    VenueDataTimeoutException,
    VenueNotFoundException,
)
from src.domain.interfaces import VenueDataClient
from src.infrastructure.database import Base
from src.infrastructure.repositories import (
    PostgresAssessmentRepository,
    PostgresOfferRepository,
)
from src.service.scoring.models import TransactionRecord, TransactionRole


# =============================================================================
# Test Data Generation
# =============================================================================

@dataclass(frozen=True)
class VenueProfile:
    """Shape of a generated payment history."""

    name: str
    days: int
    per_day: int
    amount: float
    idle_days: int = 0
    cash_every: int = 0


VENUE_PROFILES: Dict[str, VenueProfile] = {
    # Large, steady, a year and more of history
    "ven_prime": VenueProfile(name="Casa Lupe", days=400, per_day=40, amount=250.0),
    # Six weeks old
    "ven_new": VenueProfile(name="Pop-Up Bar", days=45, per_day=10, amount=500.0),
    # Closed for the last month
    "ven_dormant": VenueProfile(
        name="Old Harbor", days=300, per_day=10, amount=300.0, idle_days=30, cash_every=2
    ),
}


def generate_payments(profile: VenueProfile, now: datetime) -> List[TransactionRecord]:
    """Sales every day of the profile, 15 minutes apart, oldest first."""
    records = []
    for day in range(profile.days - 1, profile.idle_days - 1, -1):
        for k in range(profile.per_day):
            method = "CASH" if profile.cash_every and k % profile.cash_every == 0 else "CARD"
            records.append(
                TransactionRecord(
                    amount=profile.amount,
                    role=TransactionRole.SALE,
                    method=method,
                    timestamp=now - timedelta(days=day, minutes=15 * (profile.per_day - k)),
                )
            )
    return records


# =============================================================================
# Mock Clients
# =============================================================================

class MockVenueDataClient(VenueDataClient):
    """Mock payments platform serving generated venue histories."""

    def __init__(
        self,
        profiles: Dict[str, VenueProfile] | None = None,
        fail_for_venues: set | None = None,
        timeout_for_venues: set | None = None,
    ):
        self.profiles = dict(VENUE_PROFILES if profiles is None else profiles)
        self.fail_for_venues = fail_for_venues or set()
        self.timeout_for_venues = timeout_for_venues or set()
        self.call_count = 0

    async def get_venue(self, venue_id: str) -> Venue:
        self.call_count += 1

        if venue_id in self.timeout_for_venues:
            raise VenueDataTimeoutException()
        if venue_id in self.fail_for_venues:
            raise VenueDataException(message="Payments platform unavailable", status_code=500)

        profile = self.profiles.get(venue_id)
        if profile is None:
            raise VenueNotFoundException(venue_id)

        return Venue(
            id=venue_id,
            name=profile.name,
            slug=profile.name.lower().replace(" ", "-"),
            organization_name=f"{profile.name} Group",
        )

    async def get_transactions(self, venue_id: str, since: datetime) -> List[TransactionRecord]:
        profile = self.profiles[venue_id]
        return [t for t in generate_payments(profile, utcnow()) if t.timestamp >= since]

    async def list_active_venue_ids(self) -> List[str]:
        return sorted(set(self.profiles) | self.fail_for_venues | self.timeout_for_venues)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite only honors SAVEPOINT when SQLAlchemy emits BEGIN itself
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def assessment_repository(test_session: AsyncSession) -> PostgresAssessmentRepository:
    return PostgresAssessmentRepository(test_session)


@pytest.fixture
def offer_repository(test_session: AsyncSession) -> PostgresOfferRepository:
    return PostgresOfferRepository(test_session)


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_venue_client() -> MockVenueDataClient:
    """Create a mock venue data client."""
    return MockVenueDataClient()


@pytest.fixture
def failing_venue_client() -> MockVenueDataClient:
    """Create a venue client that fails for every known venue."""
    return MockVenueDataClient(profiles={}, fail_for_venues=set(VENUE_PROFILES))


# =============================================================================
# App Client Fixtures
# =============================================================================

def _override_dependencies(session: AsyncSession, venue_client: VenueDataClient) -> None:
    async def override_get_assessment_repository():
        return PostgresAssessmentRepository(session)

    async def override_get_offer_repository():
        return PostgresOfferRepository(session)

    def override_get_venue_client():
        return venue_client

    app.dependency_overrides[get_assessment_repository] = override_get_assessment_repository
    app.dependency_overrides[get_offer_repository] = override_get_offer_repository
    app.dependency_overrides[get_venue_client] = override_get_venue_client


@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    mock_venue_client: MockVenueDataClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database
    - Mocks the payments platform with generated venue histories
    """
    _override_dependencies(test_session, mock_venue_client)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_failing_platform(
    test_session: AsyncSession,
    failing_venue_client: MockVenueDataClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the payments platform always fails."""
    _override_dependencies(test_session, failing_venue_client)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def offer_request() -> dict:
    """Request body for a standard offer."""
    return {
        "offer_amount": 250000,
        "factor_rate": 1.12,
        "repayment_percent": 0.15,
        "notes": "Kitchen refit",
        "created_by": "staff_42",
    }
