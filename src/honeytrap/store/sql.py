"""SQLAlchemy-backed record store.

Translates store filters into SQLAlchemy Core statements against the
tables declared in ``honeytrap.db.schema``. SQLite keeps naive
datetimes, so values are stored as naive UTC and handed back aware.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from honeytrap.db.schema import Base
from honeytrap.db.session import get_db_session, get_session_factory
from honeytrap.store.base import Filter, Order, RecordStore, Row
from honeytrap.store.errors import ConstraintError, NotFoundError, TransportError

logger = logging.getLogger(__name__)


def _to_db(value: Any) -> Any:
    """Convert an aware datetime to naive UTC for storage."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    if isinstance(value, tuple):
        return tuple(_to_db(v) for v in value)
    return value


def _from_db(row: Row) -> Row:
    """Attach UTC to naive datetimes read back from the database."""
    return {
        key: value.replace(tzinfo=timezone.utc)
        if isinstance(value, datetime) and value.tzinfo is None
        else value
        for key, value in row.items()
    }


class SqlRecordStore(RecordStore):
    """Record store over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @classmethod
    def from_path(cls, db_path: Path | None = None) -> SqlRecordStore:
        """Build a store for the SQLite database at ``db_path``."""
        return cls(get_session_factory(db_path))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _session(self, table: str) -> Generator[Session, None, None]:
        try:
            with get_db_session(session_factory=self._session_factory) as session:
                yield session
        except IntegrityError as e:
            logger.debug("Constraint violation on %s: %s", table, e.orig)
            raise ConstraintError(str(e.orig), table=table) from e
        except SQLAlchemyError as e:
            logger.debug("Query failed on %s: %s", table, e)
            raise TransportError(str(e), table=table) from e

    @staticmethod
    def _table(name: str) -> sa.Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise NotFoundError(f"Unknown table: {name}", table=name) from None

    @staticmethod
    def _column(table: sa.Table, name: str) -> sa.Column:
        try:
            return table.c[name]
        except KeyError:
            raise ConstraintError(
                f"Unknown column: {table.name}.{name}", table=table.name
            ) from None

    def _clause(self, table: sa.Table, flt: Filter) -> sa.ColumnElement[bool]:
        column = self._column(table, flt.column)
        value = _to_db(flt.value)
        if flt.op == "eq":
            return column == value
        if flt.op == "neq":
            return column != value
        if flt.op == "gt":
            return column > value
        if flt.op == "gte":
            return column >= value
        if flt.op == "lt":
            return column < value
        if flt.op == "lte":
            return column <= value
        if flt.op == "is_null":
            return column.is_(None)
        if flt.op == "not_null":
            return column.is_not(None)
        if flt.op == "in":
            return column.in_(value)
        raise ValueError(f"Unsupported filter op: {flt.op}")

    def _values(self, table: sa.Table, row: Row) -> Row:
        return {self._column(table, key).name: _to_db(value) for key, value in row.items()}

    # ------------------------------------------------------------------
    # RecordStore
    # ------------------------------------------------------------------

    def query(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        order_by: Order | None = None,
        limit: int | None = None,
        columns: Sequence[str] | None = None,
    ) -> list[Row]:
        tbl = self._table(table)
        if columns:
            stmt = sa.select(*(self._column(tbl, c) for c in columns))
        else:
            stmt = sa.select(tbl)
        stmt = stmt.where(*(self._clause(tbl, f) for f in filters))
        if order_by is not None:
            column = self._column(tbl, order_by.column)
            stmt = stmt.order_by(column.asc() if order_by.ascending else column.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._session(table) as session:
            rows = session.execute(stmt).mappings().all()
            return [_from_db(dict(r)) for r in rows]

    def count(self, table: str, filters: Sequence[Filter] = ()) -> int | None:
        tbl = self._table(table)
        stmt = (
            sa.select(sa.func.count())
            .select_from(tbl)
            .where(*(self._clause(tbl, f) for f in filters))
        )
        with self._session(table) as session:
            return session.execute(stmt).scalar_one()

    def insert(self, table: str, row: Row) -> Row:
        tbl = self._table(table)
        values = self._values(tbl, row)
        with self._session(table) as session:
            result = session.execute(sa.insert(tbl).values(**values))
            pk = result.inserted_primary_key[0]
            inserted = session.execute(sa.select(tbl).where(tbl.c.id == pk)).mappings().one()
            return _from_db(dict(inserted))

    def update(self, table: str, id: str, values: Row) -> None:
        tbl = self._table(table)
        values = self._values(tbl, values)
        if not values:
            return
        with self._session(table) as session:
            session.execute(sa.update(tbl).where(tbl.c.id == id).values(**values))

    def delete(self, table: str, id: str) -> None:
        tbl = self._table(table)
        with self._session(table) as session:
            session.execute(sa.delete(tbl).where(tbl.c.id == id))
