"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from tests.test_constants import TEST_INTERNAL_JOB_TOKEN, TEST_JWT_SECRET

# Force test settings when pytest runs; don't inherit from .env
_test_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
os.environ["DATABASE_URL"] = f"postgresql+psycopg://{_test_user}@localhost:5432/advokat_test"
os.environ.setdefault("JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("INTERNAL_JOB_TOKEN", TEST_INTERNAL_JOB_TOKEN)
os.environ.pop("DATA_PLATFORM_URL", None)
os.environ.pop("SERVICE_ROLE_KEY", None)

# Set TEST_DATABASE_URL to a Postgres database to run DB tests against the
# migrated schema; otherwise an in-memory SQLite database is used.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session (for integration tests)."""
    from app.db.session import get_db
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


def _sqlite_engine():
    """In-memory SQLite shared across the session, with working SAVEPOINTs."""
    from app.db.session import Base
    import app.models  # noqa: F401

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN.
    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


def _postgres_engine(url: str):
    """Run migrations against TEST_DATABASE_URL once and return an engine for it."""
    import subprocess
    import sys

    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=project_root,
        capture_output=True,
        text=True,
        timeout=30,
        env={**os.environ, "DATABASE_URL": url},
    )
    assert result.returncode == 0, f"alembic upgrade head failed: {result.stderr}"
    return create_engine(url)


@pytest.fixture(scope="session")
def test_engine():
    """Engine for DB tests; schema created once per test session."""
    engine = _postgres_engine(TEST_DATABASE_URL) if TEST_DATABASE_URL else _sqlite_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Session:
    """Database session for model tests. All changes are rolled back after each test."""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def service_db(db: Session):
    """Patch service_session() in the internal router to yield the test session."""
    from contextlib import contextmanager
    from unittest.mock import patch

    @contextmanager
    def _service_session():
        yield db

    with patch("app.api.internal.service_session", _service_session):
        yield db
