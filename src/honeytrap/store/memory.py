"""In-memory record store for tests and demos.

Validates tables and columns against ``honeytrap.db.schema`` and applies
the same column defaults as the SQL store, so code exercised against it
behaves as it would against a real database. Failures can be injected
per operation and table to exercise error paths.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa

from honeytrap.db.schema import Base
from honeytrap.store.base import Filter, Order, RecordStore, Row
from honeytrap.store.errors import ConstraintError, NotFoundError, StoreError


def _normalize(value: Any) -> Any:
    """Treat naive datetimes as UTC so comparisons never mix kinds."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    if isinstance(value, tuple):
        return tuple(_normalize(v) for v in value)
    return value


def _matches(row: Row, flt: Filter) -> bool:
    value = row.get(flt.column)
    target = _normalize(flt.value)
    if flt.op == "is_null":
        return value is None
    if flt.op == "not_null":
        return value is not None
    # NULL never compares equal or ordered, as in SQL
    if value is None:
        return False
    if flt.op == "eq":
        return value == target
    if flt.op == "neq":
        return value != target
    if flt.op == "gt":
        return value > target
    if flt.op == "gte":
        return value >= target
    if flt.op == "lt":
        return value < target
    if flt.op == "lte":
        return value <= target
    if flt.op == "in":
        return value in target
    raise ValueError(f"Unsupported filter op: {flt.op}")


class MemoryRecordStore(RecordStore):
    """Record store keeping rows in per-table lists, in insertion order.

    Attributes:
        calls: Log of ``(operation, table)`` pairs, in call order.
    """

    def __init__(self) -> None:
        self._rows: dict[str, list[Row]] = {name: [] for name in Base.metadata.tables}
        self._failures: dict[tuple[str, str], StoreError] = {}
        self._lock = threading.Lock()
        self.calls: list[tuple[str, str]] = []

    def fail(self, operation: str, table: str, error: StoreError) -> None:
        """Make every later ``operation`` on ``table`` raise ``error``."""
        self._failures[(operation, table)] = error

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _enter(self, operation: str, table: str) -> sa.Table:
        with self._lock:
            self.calls.append((operation, table))
        error = self._failures.get((operation, table))
        if error is not None:
            raise error
        try:
            return Base.metadata.tables[table]
        except KeyError:
            raise NotFoundError(f"Unknown table: {table}", table=table) from None

    @staticmethod
    def _check_columns(table: sa.Table, names: Sequence[str]) -> None:
        for name in names:
            if name not in table.c:
                raise ConstraintError(f"Unknown column: {table.name}.{name}", table=table.name)

    @staticmethod
    def _default(column: sa.Column) -> Any:
        default = column.default
        if default is None:
            return None
        if default.is_callable:
            return default.arg(None)
        return default.arg

    def _filtered(self, tbl: sa.Table, filters: Sequence[Filter]) -> list[Row]:
        self._check_columns(tbl, [f.column for f in filters])
        return [row for row in self._rows[tbl.name] if all(_matches(row, f) for f in filters)]

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
        tbl = self._enter("query", table)
        with self._lock:
            rows = self._filtered(tbl, filters)

        if order_by is not None:
            self._check_columns(tbl, [order_by.column])
            # NULLs sort first ascending, last descending (SQLite order)
            rows = sorted(
                rows,
                key=lambda r: (r[order_by.column] is not None, r[order_by.column]),
                reverse=not order_by.ascending,
            )
        if limit is not None:
            rows = rows[:limit]
        if columns:
            self._check_columns(tbl, columns)
            rows = [{c: row[c] for c in columns} for row in rows]
        return copy.deepcopy(rows)

    def count(self, table: str, filters: Sequence[Filter] = ()) -> int | None:
        tbl = self._enter("count", table)
        with self._lock:
            return len(self._filtered(tbl, filters))

    def insert(self, table: str, row: Row) -> Row:
        tbl = self._enter("insert", table)
        self._check_columns(tbl, list(row))

        record: Row = {}
        for column in tbl.columns:
            if column.name in row:
                record[column.name] = _normalize(copy.deepcopy(row[column.name]))
            else:
                record[column.name] = self._default(column)
            if record[column.name] is None and not column.nullable:
                raise ConstraintError(
                    f"Null value in {table}.{column.name} violates not-null constraint",
                    table=table,
                )

        with self._lock:
            if any(r["id"] == record["id"] for r in self._rows[table]):
                raise ConstraintError(f"Duplicate key {record['id']} in {table}", table=table)
            self._rows[table].append(record)
        return copy.deepcopy(record)

    def update(self, table: str, id: str, values: Row) -> None:
        tbl = self._enter("update", table)
        self._check_columns(tbl, list(values))
        with self._lock:
            for row in self._rows[table]:
                if row["id"] == id:
                    for name, value in values.items():
                        if value is None and not tbl.c[name].nullable:
                            raise ConstraintError(
                                f"Null value in {table}.{name} violates not-null constraint",
                                table=table,
                            )
                    row.update({k: _normalize(copy.deepcopy(v)) for k, v in values.items()})

    def delete(self, table: str, id: str) -> None:
        self._enter("delete", table)
        with self._lock:
            self._rows[table] = [row for row in self._rows[table] if row["id"] != id]
