"""
pytest Fixtures for Bookshelf API Tests

Shared fixtures used across all test files.

FIXTURE OVERVIEW:
=================
- engine: a fresh in-memory SQLite database per test (StaticPool keeps the
  single connection alive, so every session sees the same database)
- db_session: session on that engine, also handed to the app via get_db
- client: anonymous TestClient
- auth_client / other_client: TestClients logged in as two different
  users; each keeps its own cookie jar
- make_tag / make_book: create records through the API as a given client
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, lowers the bcrypt cost and sets a test key
import os

os.environ["ENVIRONMENT"] = "development"
os.environ["SECRET_KEY"] = "unit-test-signing-key-0123456789abcdef0123456789"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.database import create_db_engine, create_tables, drop_tables, get_db
from bookshelf.main import app

API = "/api"
DEFAULT_PASSWORD = "correct-horse-battery"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """
    Create an in-memory SQLite engine with the full schema.

    Built through create_db_engine so the foreign-key PRAGMA and JSON
    serializer match the application engine.
    """
    test_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    create_tables(test_engine)

    yield test_engine

    drop_tables(test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Session bound to the test engine."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def override_db(db_session: Session) -> Generator[None, None, None]:
    """Route the app's get_db dependency to the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


# =============================================================================
# CLIENT FIXTURES
# =============================================================================
def register(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Register through the API; the client keeps the session cookie."""
    response = client.post(f"{API}/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["user"]


@pytest.fixture
def client(override_db) -> Generator[TestClient, None, None]:
    """Anonymous test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(override_db) -> Generator[TestClient, None, None]:
    """Client logged in as reader@example.com."""
    with TestClient(app) as test_client:
        test_client.user = register(test_client, "reader@example.com")
        yield test_client


@pytest.fixture
def other_client(override_db) -> Generator[TestClient, None, None]:
    """Client logged in as a second, unrelated user."""
    with TestClient(app) as test_client:
        test_client.user = register(test_client, "other@example.com")
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def make_tag() -> Callable[..., dict]:
    """Create a tag as the given client and return the response body."""

    def _make_tag(client: TestClient, name: str, color: str | None = None) -> dict:
        payload = {"name": name}
        if color is not None:
            payload["color"] = color
        response = client.post(f"{API}/tags", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_tag


@pytest.fixture
def make_book() -> Callable[..., dict]:
    """Create a book as the given client and return the response body."""

    def _make_book(client: TestClient, title: str = "Dune", **fields) -> dict:
        response = client.post(f"{API}/books", json={"title": title, **fields})
        assert response.status_code == 201, response.text
        return response.json()

    return _make_book
