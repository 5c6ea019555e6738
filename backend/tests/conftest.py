"""
Test fixtures for TripAI backend tests.
"""
import os

# Must be set before tripai.config is first imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("GEMINI_API_KEY", "")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from tripai.api.deps import get_ai_backend
from tripai.database import Base, get_db
from tripai.main import app
from tripai.models import User, Trip  # noqa: F401
from tests.factories import FakeBackend


# Create test database engine (SQLite in-memory)
TEST_DATABASE_URL = "sqlite:///:memory:"

test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign key constraints for SQLite
@event.listens_for(test_engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Creates all tables before the test and drops them after.
    """
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def override_get_db(db_session):
    """
    Override the get_db dependency to use the test database session.
    """
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    return _override_get_db


@pytest.fixture(scope="function")
def fake_backend():
    return FakeBackend()


@pytest.fixture(scope="function")
async def client(override_get_db, fake_backend):
    """
    Create an async test client with the database and provider overridden.
    """
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_backend] = lambda: fake_backend

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Create a user directly in the database and return it."""
    from tripai.services.accounts import AccountStore

    counter = {"n": 0}

    def _make_user(name="Ana", email=None, password="secret123"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return AccountStore(db_session).register(name, email, password)

    return _make_user


@pytest.fixture
async def auth_headers(client):
    """Register a user through the API and return its bearer headers."""
    response = await client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": "ana@example.com", "password": "secret123"},
    )
    token = response.json()["token"]
    return {"Authorization": f"Bearer {token}"}
