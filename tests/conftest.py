"""
Test configuration and fixtures for the device registry.

- Function-scoped in-memory SQLite engine, so every test starts empty
- TestClient with database dependency override
- A fresh SessionDirectory per test, installed on the app
- Authenticated client fixtures
"""

import os

# Must be set before deviceregistry.config is imported
os.environ.setdefault("DEVICEREGISTRY_DATABASE_URL", "sqlite://")
os.environ.setdefault("DEVICEREGISTRY_ENVIRONMENT", "test")

from datetime import timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from deviceregistry.config import settings
from deviceregistry.database import Base, get_db
from deviceregistry.main import app
from deviceregistry.models import User
from deviceregistry.services.auth.session_directory import SessionDirectory
from tests.factories import create_user


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def test_engine():
    """
    In-memory SQLite engine shared by every connection in the test.

    StaticPool keeps the single in-memory database alive across the
    threads TestClient uses to run sync dependencies.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """Database session bound to the per-test engine."""
    TestingSessionLocal = sessionmaker(bind=test_engine, autoflush=False)
    session = TestingSessionLocal()

    yield session

    session.close()


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session_directory() -> SessionDirectory:
    """An isolated SessionDirectory for one test."""
    return SessionDirectory()


# =============================================================================
# TestClient Fixtures
# =============================================================================


@pytest.fixture
def client(db: Session, session_directory: SessionDirectory) -> Generator[TestClient, None, None]:
    """
    TestClient with database dependency override.

    The database session is injected into the app's get_db dependency and
    the test's SessionDirectory replaces the app's.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    app.dependency_overrides[get_db] = override_get_db
    original_directory = app.state.session_directory
    app.state.session_directory = session_directory

    with TestClient(app) as test_client:
        yield test_client

    app.state.session_directory = original_directory
    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    return create_user(db, email="testuser@example.com", password="testpassword123")


@pytest.fixture
def session_token(session_directory: SessionDirectory, test_user: User) -> str:
    """A live session for the test user."""
    return session_directory.create(test_user.id, test_user.email, timedelta(hours=24))


@pytest.fixture
def auth_client(client: TestClient, session_token: str) -> TestClient:
    """Authenticated TestClient for the test user."""
    client.cookies.set(settings.session_cookie_name, session_token)
    return client


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m not slow')"
    )
