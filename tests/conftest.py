"""Pytest fixtures for testing"""

import os

# Configure before the application reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ADVISOR_API_KEY", "test-key")

import pytest
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_advisor.api.dependencies import get_sleep
from budget_advisor.api.main import create_app
from budget_advisor.domain.models import BudgetData, CategoryTotal, Income
from budget_advisor.infrastructure.database.models import Base
from budget_advisor.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeSleep:
    """Records backoff delays instead of waiting"""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total_seconds(self) -> float:
        return sum(self.calls)


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
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def client(db: Session, fake_sleep: FakeSleep) -> TestClient:
    """Create FastAPI test client with test database and instant retries"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sleep] = lambda: fake_sleep
    return TestClient(app)


def make_budget(income: float, *expenses: tuple, currency: str = "USD") -> BudgetData:
    """Scorer input from (category, monthly amount) pairs"""
    return BudgetData(
        income=Income(amount=income, currency=currency),
        expenses=[CategoryTotal(category=cat, amount=amount) for cat, amount in expenses],
    )


@pytest.fixture
def healthy_budget() -> BudgetData:
    """Income 1000, expenses 550, no emergency fund (score 95)"""
    return make_budget(1000, ("Housing", 300), ("Food", 250))


@pytest.fixture
def saved_budget_payload() -> dict:
    """Request body for saving a budget"""
    return {
        "name": "March plan",
        "income": {"amount": 1000, "frequency": "monthly", "currency": "USD"},
        "expenses": [
            {"category": "Housing", "amount": 300, "frequency": "monthly"},
            {"category": "Food", "amount": 250, "frequency": "monthly"},
        ],
    }
