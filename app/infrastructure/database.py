"""Database configuration and session management."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite connections are shared across the worker threads that run remote
    writes, and in-memory databases keep a single connection so every session
    sees the same data.
    """

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    options: dict[str, object] = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    engine = create_engine(database_url, **options)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


engine = build_engine(get_settings().database_url)
SessionLocal = build_session_factory(engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from app.infrastructure import models  # noqa: F401  # ensure models are imported

    target = bind or engine
    Base.metadata.create_all(bind=target, checkfirst=True)
    logger.debug("Database schema ensured on %s", target.url)


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "build_session_factory",
    "engine",
    "initialize_database",
]
