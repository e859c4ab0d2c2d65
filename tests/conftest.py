"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from makkaan_portal.api.dependencies import get_reference_today
from makkaan_portal.api.main import create_app
from makkaan_portal.domain.models import ChildPayment, InstallmentRow
from makkaan_portal.domain.terms import build_contract
from makkaan_portal.infrastructure.database.models import Base
from makkaan_portal.infrastructure.database.session import build_engine, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

REFERENCE_DATE = date(2024, 3, 1)


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
    """Create FastAPI test client with test database and a pinned reference date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reference_today] = lambda: REFERENCE_DATE
    return TestClient(app)


@pytest.fixture
def client_payload() -> dict:
    """Create-client request matching the 1,000,000 / 36 month reference contract"""
    return {
        "full_name": "Ayesha Khan",
        "email": "  Ayesha.Khan@Example.com ",
        "phone": "03001234567",
        "cnic": "35202-1234567-1",
        "address": "House 12, Street 4, Lahore",
        "unit_number": "A-101",
        "unit_type": "Apartment",
        "unit_size": 850,
        "total_amount": 1000000,
        "down_payment": 200000,
        "possession": 10,
        "months": 36,
        "booking_date": "2023-12-15",
        "start_date": "2024-01-01",
    }


@pytest.fixture
def sample_contract():
    return build_contract(
        total_amount=1_000_000,
        down_payment=200_000,
        possession_pct=10,
        months=36,
        start_date="2024-01-01",
    )


@pytest.fixture
def sample_rows() -> list[InstallmentRow]:
    """Three monthly rows: paid late, part-paid by a child payment, untouched"""
    return [
        InstallmentRow(
            sr_no=1,
            installment_amount=Decimal(19444),
            due_date="2024-01-01",
            amount_paid=Decimal(19444),
            payment_date="2024-01-05",
        ),
        InstallmentRow(
            sr_no=2,
            installment_amount=Decimal(19444),
            due_date="2024-02-01",
            late_payment_surcharge=Decimal(500),
            children=[ChildPayment(line_no=1, amount_paid=Decimal(10000), payment_date="2024-02-10")],
        ),
        InstallmentRow(
            sr_no=3,
            installment_amount=Decimal(19444),
            due_date="2024-03-01",
        ),
    ]
