"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Tables are created before each test and dropped
after it, so no test data persists.
"""

import os

TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from smb_ledger.main import app
from smb_ledger.models.base import Base, enable_sqlite_savepoints, get_db
from smb_ledger.schemas.company import CompanyCreate
from smb_ledger.services.company_service import CompanyService


engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
enable_sqlite_savepoints(engine)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test database.

    get_db is overridden so the app uses the test session.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_company(db_session, name="Acme Trading"):
    """Create a company with the standard chart and commit it."""
    company, _ = CompanyService(db_session).create_company(
        CompanyCreate(name=name)
    )
    db_session.commit()
    return company


@pytest.fixture
def company(db_session):
    return make_company(db_session)


@pytest.fixture
def other_company(db_session):
    return make_company(db_session, name="Beta Supplies")
