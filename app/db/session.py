"""
Database session management. SQLAlchemy 2.x style.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings


def _connect_args(url: str, connect_timeout: int) -> dict:
    if not url.startswith("postgresql"):
        return {}
    return {
        "connect_timeout": connect_timeout,
        "options": "-c timezone=UTC",
    }


settings = get_settings()
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
    echo=settings.debug,
    connect_args=_connect_args(settings.database_url, settings.db_connect_timeout),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


def check_db_connection() -> None:
    """
    Verify database connectivity. Raises if unreachable.
    Call during application startup.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_service_engine() -> Engine:
    """Engine bound to the privileged data-platform role.

    Raises SweepConfigError when DATA_PLATFORM_URL or SERVICE_ROLE_KEY is unset.
    """
    current = get_settings()
    url = current.service_database_url()
    return create_engine(
        url,
        pool_pre_ping=True,
        echo=current.debug,
        connect_args=_connect_args(url, current.db_connect_timeout),
    )


@contextmanager
def service_session() -> Iterator[Session]:
    """Open a privileged session for one job invocation.

    The session is closed and the engine disposed on exit, whether the job
    succeeded or raised.
    """
    service_engine = create_service_engine()
    db = Session(bind=service_engine, autoflush=False)
    try:
        yield db
    finally:
        db.close()
        service_engine.dispose()
