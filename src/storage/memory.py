"""
In-Memory Entity Store

Simple in-memory implementation for unit tests and local runs.
No persistence, single process only.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from src.contracts.records import EntityKind, _now_utc
from src.contracts.storage import StoredEntity
from src.storage.errors import StoreUnavailable, WriteConflict

logger = logging.getLogger(__name__)


class InMemoryEntityStore:
    """
    In-memory implementation of EntityStore.

    Mirrors table semantics that matter to callers: the table must be
    created before writes, inserts never overwrite, and reads of a missing
    table come back empty.
    """

    def __init__(self, kind: EntityKind, name: str | None = None):
        """
        Initialize the store.

        Args:
            kind: Entity kind held by this store
            name: Table name (defaults to the kind's value)
        """
        self._kind = kind
        self._name = name or kind.value
        self._rows: dict[tuple[str, str], StoredEntity] | None = None
        self.create_calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def exists(self) -> bool:
        """Whether the table has been created."""
        return self._rows is not None

    async def ensure_exists(self) -> None:
        self.create_calls += 1
        if self._rows is None:
            self._rows = {}
            logger.info(f"Created table {self._name}")

    async def put(self, entity: StoredEntity) -> None:
        if self._rows is None:
            raise StoreUnavailable(f"Table {self._name} does not exist", store=self._name)
        if entity.key in self._rows:
            raise WriteConflict(
                f"Entity {entity.partition_key}/{entity.row_key} already exists",
                store=self._name,
                partition_key=entity.partition_key,
                row_key=entity.row_key,
            )
        self._rows[entity.key] = entity.with_timestamp(_now_utc())

    async def list_all(self) -> AsyncIterator[StoredEntity]:
        if self._rows is None:
            return
        # Snapshot so concurrent inserts do not break iteration
        for entity in list(self._rows.values()):
            yield entity

    # =========================================================================
    # Testing Helpers
    # =========================================================================

    def __len__(self) -> int:
        return len(self._rows or {})

    def reset(self) -> None:
        """Drop the table (testing only)."""
        self._rows = None
        self.create_calls = 0


__all__ = ["InMemoryEntityStore"]
