"""
Entity Store Protocol

Uses typing.Protocol for duck-typed interface definitions.
No inheritance required - any class implementing these methods qualifies.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.contracts.records import EntityKind
    from src.contracts.storage import StoredEntity


@runtime_checkable
class EntityStore(Protocol):
    """
    Keyed durable table for one entity kind.

    Local implementation keeps rows in memory.
    Production implementation uses Azure Table Storage.
    """

    @property
    def name(self) -> str:
        """Table name."""
        ...

    @property
    def kind(self) -> EntityKind:
        """Entity kind stored in this table."""
        ...

    async def ensure_exists(self) -> None:
        """
        Create the table if absent. Safe to call repeatedly and concurrently.

        Raises:
            StoreUnavailable: If the backend cannot be reached or refuses creation
        """
        ...

    async def put(self, entity: StoredEntity) -> None:
        """
        Insert a new entity keyed by (PartitionKey, RowKey).

        Raises:
            WriteConflict: If the key already exists
            StoreUnavailable: On backend error or if the table does not exist
        """
        ...

    def list_all(self) -> AsyncIterator[StoredEntity]:
        """
        Lazily iterate every entity in the table, in no particular order.

        Yields nothing if the table does not exist.

        Raises:
            StoreUnavailable: On backend error
        """
        ...


__all__ = ["EntityStore"]
