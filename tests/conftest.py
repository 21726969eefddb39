"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from wealthblend.api.main import create_app
from wealthblend.api.dependencies import get_clock
from wealthblend.infrastructure.database.models import Base
from wealthblend.infrastructure.database.session import get_db
from wealthblend.domain.models import Budget, BudgetCategory


# In-memory test database shared across connections
TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    """Fixed clock reading used by every derivation under test"""
    return NOW


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, now: datetime) -> TestClient:
    """Create FastAPI test client with test database and a frozen clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: now)
    return TestClient(app)


@pytest.fixture
def user_headers() -> dict:
    return {"X-User-ID": "user_alice"}


@pytest.fixture
def sample_budget() -> Budget:
    """Monthly food budget, $100 envelope, no spending yet"""
    return Budget(
        user_id="user_alice",
        name="Groceries",
        category=BudgetCategory.FOOD,
        budgeted_amount=100,
    )


@pytest.fixture
def session_factory() -> sessionmaker:
    """Session factory bound to the test database, for code that opens its own sessions"""
    return TestingSessionLocal
