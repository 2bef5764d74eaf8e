"""Record store error types.

Every store implementation raises these; callers see them unchanged.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for record store failures."""

    def __init__(self, message: str, *, table: str | None = None):
        super().__init__(message)
        self.table = table


class NotFoundError(StoreError):
    """Referenced table or record does not exist."""


class UnauthorizedError(StoreError):
    """The store rejected the caller's credentials or access."""


class TransportError(StoreError):
    """The store could not be reached or the query could not run."""


class ConstraintError(StoreError):
    """A write violated a schema constraint."""
