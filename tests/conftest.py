"""Shared pytest fixtures for honeytrap tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from honeytrap.db.schema import Base
from honeytrap.models.domain import Caller
from honeytrap.store import MemoryRecordStore, SqlRecordStore


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def memory_store():
    """Create an empty in-memory record store."""
    return MemoryRecordStore()


@pytest.fixture
def sql_store(tmp_path):
    """Create a SQL record store on a fresh file database.

    A file database gives each worker thread its own connection.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    return SqlRecordStore(sessionmaker(bind=engine))


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run a test against both record store implementations."""
    if request.param == "memory":
        return MemoryRecordStore()
    return request.getfixturevalue("sql_store")


@pytest.fixture
def caller():
    """The authenticated test user."""
    return Caller(user_id="user-001")
