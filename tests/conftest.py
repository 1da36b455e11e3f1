"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from clinic_billing.api.main import create_app
from clinic_billing.api.dependencies import get_today
from clinic_billing.infrastructure.database.models import Base
from clinic_billing.infrastructure.database.session import get_db, init_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_USER = "user_clinic_a"
OTHER_USER = "user_clinic_b"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database (with seeded categories) and session"""
    init_db(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def today() -> date:
    """Fixed 'today' for dashboard and overdue calculations"""
    return date(2024, 5, 15)


@pytest.fixture
def app(db: Session, today: date):
    """FastAPI app bound to the test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Test client authenticated as TEST_USER"""
    return TestClient(app, headers={"X-User-ID": TEST_USER})


@pytest.fixture
def other_client(app) -> TestClient:
    """Test client authenticated as a different user"""
    return TestClient(app, headers={"X-User-ID": OTHER_USER})


@pytest.fixture
def appointment_payload() -> dict:
    """Three credit card installments for a procedure on Friday 2024-03-01"""
    return {
        "patient_name": "Maria Silva",
        "cpf": "123.456.789-09",
        "procedure": "Toxina Botulínica",
        "total_value": "300.00",
        "installments": 3,
        "procedure_date": "2024-03-01",
        "payment_method": "credit_card",
    }
