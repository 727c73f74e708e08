"""
Storage Errors

Exception hierarchy raised by EntityStore implementations.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all entity store errors."""

    def __init__(self, message: str, store: str | None = None):
        """
        Initialize store error.

        Args:
            message: Error description
            store: Name of the table/store involved
        """
        self.store = store
        super().__init__(message)


class StoreUnavailable(StoreError):
    """Backend unreachable, provisioning failed, or the store does not exist."""


class EntityRejected(StoreError):
    """The backend cannot represent the entity (e.g. a column value out of range)."""


class WriteConflict(StoreError):
    """An entity with the same (PartitionKey, RowKey) already exists."""

    def __init__(
        self,
        message: str,
        store: str | None = None,
        partition_key: str | None = None,
        row_key: str | None = None,
    ):
        """
        Initialize write conflict.

        Args:
            message: Error description
            store: Name of the table/store involved
            partition_key: Partition of the conflicting entity
            row_key: Row key of the conflicting entity
        """
        self.partition_key = partition_key
        self.row_key = row_key
        super().__init__(message, store)


__all__ = [
    "EntityRejected",
    "StoreError",
    "StoreUnavailable",
    "WriteConflict",
]
