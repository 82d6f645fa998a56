"""Pytest fixtures and configuration for userapi tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from userapi.api.app import create_app
from userapi.config import Settings
from userapi.database.database import Base
from userapi.database.models import UserDB  # noqa: F401  (registers the users table)
from userapi.database.user_repository import UserRepository


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory SQLite engine with the users table.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def user_repository(session_factory):
    """Create a UserRepository instance for testing."""
    return UserRepository(session_factory)


@pytest.fixture
def unreachable_repository(tmp_path):
    """Repository pointing at a SQLite file whose directory does not exist."""
    url = f"sqlite:///{tmp_path / 'missing-dir' / 'users.db'}"
    engine = create_engine(url, connect_args={"check_same_thread": False})
    try:
        yield UserRepository(sessionmaker(bind=engine))
    finally:
        engine.dispose()


@pytest.fixture
def test_settings(monkeypatch):
    for name in ("DATABASE_URL", "DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD",
                 "DB_DRIVER", "DB_TRUST_SERVER_CERTIFICATE", "DB_POOL_SIZE", "DB_MAX_OVERFLOW",
                 "DB_POOL_TIMEOUT_SEC", "DEBUG", "LOG_LEVEL", "ALEMBIC_INI"):
        monkeypatch.delenv(name, raising=False)
    return Settings()


@pytest.fixture
def test_client(user_repository, test_settings):
    """Create a FastAPI test client with the test repository injected."""
    app = create_app(settings=test_settings, repository=user_repository)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def unreachable_client(unreachable_repository, test_settings):
    app = create_app(settings=test_settings, repository=unreachable_repository)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
