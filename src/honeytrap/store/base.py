"""Record store interface.

The store is the only seam to persistence: filtered/sorted/limited reads,
exact counts, and insert/update/delete by primary key. Repository and
aggregation code depend on this interface, never on a concrete backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

Row = dict[str, Any]

FilterOp = Literal["eq", "neq", "gt", "gte", "lt", "lte", "is_null", "not_null", "in"]


@dataclass(frozen=True)
class Filter:
    """Single column predicate. All filters of a query are AND-ed."""

    column: str
    op: FilterOp
    value: Any = None


@dataclass(frozen=True)
class Order:
    """Sort key for a query."""

    column: str
    ascending: bool = True


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, "neq", value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, "gt", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def is_null(column: str) -> Filter:
    return Filter(column, "is_null")


def not_null(column: str) -> Filter:
    return Filter(column, "not_null")


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, "in", tuple(values))


def desc(column: str) -> Order:
    return Order(column, ascending=False)


def asc(column: str) -> Order:
    return Order(column, ascending=True)


class RecordStore(ABC):
    """Abstract base class for record stores.

    Implementations raise ``StoreError`` subclasses on failure and must
    fill generated fields (``id``, timestamps) on insert.
    Timestamps cross this interface as timezone-aware UTC datetimes.
    """

    @abstractmethod
    def query(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        order_by: Order | None = None,
        limit: int | None = None,
        columns: Sequence[str] | None = None,
    ) -> list[Row]:
        """Fetch rows matching all filters.

        Args:
            table: Table name.
            filters: Predicates, AND-ed together.
            order_by: Optional sort key. Without it, rows come back in
                store order.
            limit: Optional maximum number of rows.
            columns: Optional projection; all columns when omitted.

        Returns:
            Matching rows as plain dicts.
        """
        pass

    @abstractmethod
    def count(self, table: str, filters: Sequence[Filter] = ()) -> int | None:
        """Return the exact number of rows matching all filters.

        Implementations may return None when the backend reports no count.
        """
        pass

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert a row and return it with generated fields filled."""
        pass

    @abstractmethod
    def update(self, table: str, id: str, values: Row) -> None:
        """Update columns of the row with primary key ``id``.

        Updating a missing row is a no-op.
        """
        pass

    @abstractmethod
    def delete(self, table: str, id: str) -> None:
        """Delete the row with primary key ``id``. Missing rows are a no-op."""
        pass
