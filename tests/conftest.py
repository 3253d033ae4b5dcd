"""Pytest fixtures for testing"""

import os

# Point the application engine at SQLite before any credit_registry import
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from credit_registry.api.main import create_app
from credit_registry.infrastructure.database.models import Base
from credit_registry.infrastructure.database.session import build_engine, get_db, init_schema
from credit_registry.infrastructure.observability.logging import RequestLogger


# Test database
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    init_schema(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def request_logger(tmp_path) -> Generator[RequestLogger, None, None]:
    """Opened request logger writing under a temporary directory"""
    with RequestLogger(tmp_path / "logs", console=False) as rl:
        yield rl


def _build_client(db: Session, request_logger: RequestLogger) -> TestClient:
    app = create_app(request_logger=request_logger)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def client(db: Session, tmp_path) -> TestClient:
    """Create FastAPI test client with test database; request logging stays closed"""
    return _build_client(db, RequestLogger(tmp_path / "unused", console=False))


@pytest.fixture
def logged_client(db: Session, request_logger: RequestLogger) -> TestClient:
    """Test client whose requests land in request_logger's file"""
    return _build_client(db, request_logger)


@pytest.fixture
def client_payload() -> dict:
    return {
        "full_name": "Ada Lovelace",
        "email": "ada@example.com",
        "birth_date": "1990-12-10",
        "country": "UK",
    }


@pytest.fixture
def bank_payload() -> dict:
    return {"name": "Test Bank", "type": "PRIVATE"}


@pytest.fixture
def credit_payload(client: TestClient, client_payload: dict, bank_payload: dict) -> dict:
    """Valid credit body referencing a freshly created client and bank"""
    client_id = client.post("/api/clients", json=client_payload).json()["id"]
    bank_id = client.post("/api/banks", json=bank_payload).json()["id"]
    return {
        "client_id": client_id,
        "bank_id": bank_id,
        "min_payment": 100.0,
        "max_payment": 1000.0,
        "term_months": 24,
        "credit_type": "AUTO",
    }
