"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Generator
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cashflow_gateway.api.main import create_app
from cashflow_gateway.api.dependencies import get_ledger_sync_client
from cashflow_gateway.infrastructure.database.models import Base
from cashflow_gateway.infrastructure.database.session import get_db
from cashflow_gateway.domain.models import CreditCard, SavingsGoal


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def sync_client() -> MagicMock:
    """Ledger sync client that never touches the network"""
    client = MagicMock()
    client.send_allocation_event = AsyncMock(return_value=None)
    return client


@pytest.fixture
def client(db: Session, sync_client: MagicMock) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ledger_sync_client] = lambda: sync_client
    return TestClient(app)


@pytest.fixture
def today() -> date:
    return date(2024, 3, 1)


@pytest.fixture
def standard_card() -> CreditCard:
    """Closes on the 10th, due on the 25th of the same month"""
    return CreditCard(card_id="card_std", name="Everyday Visa", closing_day=10, payment_day=25)


@pytest.fixture
def split_cycle_card() -> CreditCard:
    """Closes on the 25th, due on the 10th of the following month"""
    return CreditCard(card_id="card_split", name="Travel Master", closing_day=25, payment_day=10)


@pytest.fixture
def savings_goals() -> list[SavingsGoal]:
    return [
        SavingsGoal(name="Emergency fund", target_amount_cents=1_000_000, current_amount_cents=200_000, allocation_percentage=30),
        SavingsGoal(name="Vacation", target_amount_cents=300_000, current_amount_cents=0, allocation_percentage=10),
        SavingsGoal(name="Dormant", target_amount_cents=50_000, current_amount_cents=5_000, allocation_percentage=0),
    ]
