"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'

import jwt  # noqa: E402

import repositories.db_models as db_models  # noqa: E402
from models.config import settings  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_token(user_id: str, **claims) -> str:
    """Sign a token the way the identity provider would."""
    payload = {"sub": user_id, **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def bearer(user: db_models.User) -> dict:
    """Authorization headers for a stored user."""
    return {"Authorization": f"Bearer {make_token(user.id, email=user.email)}"}


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session."""
    return db_session


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from helpers.rate_limiter import limiter
    from main import app

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db_session, user_id: str, email: str, **fields) -> db_models.User:
    user = db_models.User(id=user_id, email=email, **fields)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session) -> db_models.User:
    """Create a regular user."""
    return _create_user(
        db_session, "user-1", "test@example.com", first_name="Test", last_name="User"
    )


@pytest.fixture
def other_user(db_session) -> db_models.User:
    """Create a second regular user."""
    return _create_user(
        db_session, "user-2", "other@example.com", first_name="Other"
    )


@pytest.fixture
def moderator_user(db_session) -> db_models.User:
    """Create a user with the moderator role."""
    return _create_user(
        db_session,
        "mod-1",
        "mod@example.com",
        first_name="Mod",
        role=db_models.UserRole.MODERATOR,
    )


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    """Create a user with the admin role."""
    return _create_user(
        db_session,
        "admin-1",
        "admin@example.com",
        first_name="Admin",
        role=db_models.UserRole.ADMIN,
    )


def _create_entry(db_session, owner, **fields) -> db_models.WikiEntry:
    values = {
        "title": "Test Entry",
        "description": "<p>Test entry description</p>",
        "status": db_models.EntryStatus.PENDING,
    }
    values.update(fields)
    entry = db_models.WikiEntry(user_id=owner.id, **values)
    db_session.add(entry)
    db_session.commit()
    db_session.refresh(entry)
    return entry


@pytest.fixture
def approved_entry(db_session, test_user) -> db_models.WikiEntry:
    """Create an approved, public entry owned by test_user."""
    return _create_entry(
        db_session,
        test_user,
        title="Approved Entry",
        status=db_models.EntryStatus.APPROVED,
    )


@pytest.fixture
def pending_entry(db_session, test_user) -> db_models.WikiEntry:
    """Create a pending entry owned by test_user."""
    return _create_entry(db_session, test_user, title="Pending Entry")


@pytest.fixture
def special_entry(db_session, test_user) -> db_models.WikiEntry:
    """Create a special entry with a known access token."""
    return _create_entry(
        db_session,
        test_user,
        title="Special Entry",
        status=db_models.EntryStatus.APPROVED,
        is_special=True,
        special_access_token="a" * 64,
    )


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Authentication headers for test_user."""
    return bearer(test_user)


@pytest.fixture
def other_headers(other_user) -> dict:
    """Authentication headers for other_user."""
    return bearer(other_user)


@pytest.fixture
def moderator_headers(moderator_user) -> dict:
    """Authentication headers for moderator_user."""
    return bearer(moderator_user)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    """Authentication headers for admin_user."""
    return bearer(admin_user)
