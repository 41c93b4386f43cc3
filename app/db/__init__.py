"""Database package: engine, session factory and declarative base."""

from app.db.session import Base, SessionLocal, engine, get_db, service_session

__all__ = ["Base", "SessionLocal", "engine", "get_db", "service_session"]
