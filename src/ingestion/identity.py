"""Identity assignment for newly ingested records."""

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from src.contracts.records import EntityRecord
from src.contracts.storage import StoredEntity


def _new_row_key() -> str:
    return str(uuid4())


class IdentityAssigner:
    """
    Gives a candidate its fixed partition and a fresh UUID row key.

    Uniqueness is statistical; the store is not consulted.
    """

    def __init__(
        self,
        partition_key: str,
        id_factory: Callable[[], str] = _new_row_key,
    ):
        if not partition_key:
            raise ValueError("partition_key must be non-empty")
        self._partition_key = partition_key
        self._id_factory = id_factory

    @property
    def partition_key(self) -> str:
        return self._partition_key

    def assign(self, candidate: EntityRecord) -> StoredEntity:
        """Build a new StoredEntity from the candidate; the candidate is untouched."""
        return StoredEntity(
            kind=candidate.kind,
            partition_key=self._partition_key,
            row_key=self._id_factory(),
            fields=candidate.to_fields(),
        )


__all__ = ["IdentityAssigner"]
