"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.api.dependencies import get_today
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.domain.models import RecurringTemplate


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Pinned clock for API tests (a Monday)
TODAY = date(2024, 1, 15)


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
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed today"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def sample_templates() -> list[RecurringTemplate]:
    """Templates spread around 2024-01-15"""
    return [
        RecurringTemplate(
            name="Rent",
            amount=800000,
            category="rent",
            type="expense",
            recurrence_type="monthly",
            recurrence_day=10,
            next_due_date="2024-01-10",
        ),
        RecurringTemplate(
            name="Gym",
            amount=50000,
            category="fitness",
            type="expense",
            recurrence_type="monthly",
            recurrence_day=15,
            next_due_date="2024-01-15",
        ),
        RecurringTemplate(
            name="Streaming",
            amount=13500,
            category="subscription",
            type="expense",
            recurrence_type="monthly",
            recurrence_day=20,
            next_due_date="2024-01-20",
        ),
        RecurringTemplate(
            name="Salary",
            amount=3000000,
            category="salary",
            type="income",
            recurrence_type="monthly",
            recurrence_day=25,
            next_due_date="2024-01-25",
        ),
        RecurringTemplate(
            name="Old magazine",
            amount=9000,
            category="books",
            type="expense",
            recurrence_type="monthly",
            recurrence_day=1,
            next_due_date="2024-01-01",
            is_active=False,
        ),
    ]
