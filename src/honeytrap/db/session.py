"""Database session management.

Provides the engine and session factory behind the SQL record store.
Each store call opens its own session, so sessions are never shared
between the worker threads the dashboard fans out to.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from honeytrap.db.schema import Base

# Default database path
DEFAULT_DB_PATH = Path("data/honeytrap.db")

# Environment override for the database path
DB_PATH_ENV = "HONEYTRAP_DB_PATH"

# Module-level engine cache for connection pooling
_engine_cache: dict[str, Engine] = {}

# Module-level session factory cache
_session_factory_cache: dict[str, sessionmaker] = {}


def resolve_db_path(db_path: Path | None = None) -> Path:
    """Resolve the database path from argument, environment or default."""
    if db_path is not None:
        return Path(db_path)
    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH


def get_engine(db_path: Path | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by resolved db_path to enable connection pooling.
    Subsequent calls with the same path return the cached engine.

    check_same_thread=False lets pooled connections move between the
    worker threads that run store calls.

    Args:
        db_path: Path to SQLite database file. Defaults to
            $HONEYTRAP_DB_PATH, then data/honeytrap.db.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    db_path = resolve_db_path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _engine_cache:
        return _engine_cache[cache_key]

    # Create parent directories only when creating a new engine
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    _engine_cache[cache_key] = engine

    return engine


def get_session_factory(db_path: Path | None = None) -> sessionmaker:
    """Get cached session factory for the database.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        Cached sessionmaker instance.
    """
    db_path = resolve_db_path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _session_factory_cache:
        return _session_factory_cache[cache_key]

    engine = get_engine(db_path)
    factory = sessionmaker(bind=engine)
    _session_factory_cache[cache_key] = factory

    return factory


@contextmanager
def get_db_session(
    db_path: Path | None = None, *, session_factory: sessionmaker | None = None
) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Args:
        db_path: Path to SQLite database file.
        session_factory: Factory to open the session from; overrides db_path.

    Yields:
        SQLAlchemy Session instance.
    """
    factory = session_factory or get_session_factory(db_path)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(db_path: Path | None = None) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.

    Args:
        db_path: Path to SQLite database file.
    """
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
