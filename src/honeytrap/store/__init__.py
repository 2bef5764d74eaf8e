"""Record store module.

The store is the persistence seam: repository and aggregation code take a
``RecordStore`` handle explicitly and never reach for a global client.

Structure:
- store/base.py    - interface, filters and ordering
- store/errors.py  - StoreError variants
- store/sql.py     - SQLAlchemy implementation
- store/memory.py  - in-memory implementation for tests and demos
"""

from honeytrap.store.base import Filter, Order, RecordStore, Row
from honeytrap.store.errors import (
    ConstraintError,
    NotFoundError,
    StoreError,
    TransportError,
    UnauthorizedError,
)
from honeytrap.store.memory import MemoryRecordStore
from honeytrap.store.sql import SqlRecordStore

__all__ = [
    # Interface
    "Filter",
    "Order",
    "RecordStore",
    "Row",
    # Errors
    "ConstraintError",
    "NotFoundError",
    "StoreError",
    "TransportError",
    "UnauthorizedError",
    # Implementations
    "MemoryRecordStore",
    "SqlRecordStore",
]
