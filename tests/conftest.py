"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from acquisition_gateway.api.main import create_app
from acquisition_gateway.api.dependencies import get_today
from acquisition_gateway.infrastructure.database.models import Base
from acquisition_gateway.infrastructure.database.session import get_db
from acquisition_gateway.domain.loan_structure import prepare_loan_inputs
from acquisition_gateway.domain.models import LoanInputs, ProgramRules


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Inside the manufacturing fee-waiver window
VALUATION_DATE = date(2026, 1, 15)


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
    """Create FastAPI test client with test database and a fixed valuation date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: VALUATION_DATE
    return TestClient(app)


@pytest.fixture
def rules() -> ProgramRules:
    return ProgramRules()


@pytest.fixture
def baseline_inputs(rules: ProgramRules) -> LoanInputs:
    """$1M purchase, $250K EBITDA, 10.25% over 10 years, no seller note"""
    return prepare_loan_inputs(
        Decimal("1000000"),
        Decimal("250000"),
        rules=rules,
        today=VALUATION_DATE,
        interest_rate=Decimal("10.25"),
        loan_term_years=10,
    )
