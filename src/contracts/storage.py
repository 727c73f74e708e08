"""
Storage Models

Azure Table Storage entity shape for persisted records.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.contracts.records import EntityKind

# Columns managed by the table service; never treated as domain fields.
RESERVED_COLUMNS = frozenset({"PartitionKey", "RowKey", "Timestamp", "odata.etag"})


# =============================================================================
# Stored Entity
# =============================================================================


class StoredEntity(BaseModel):
    """
    An identified record, ready to persist or just read back.

    Built fresh from a decoded candidate plus its assigned identity; never
    mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    partition_key: str = Field(..., min_length=1)
    row_key: str = Field(..., min_length=1)
    fields: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime | None = Field(
        default=None,
        description="Last-modified time assigned by the store",
    )

    @property
    def key(self) -> tuple[str, str]:
        """(PartitionKey, RowKey) pair the store is keyed by."""
        return (self.partition_key, self.row_key)

    def to_table_entity(self) -> dict[str, Any]:
        """Convert to Azure Table Storage entity format."""
        data = {k: v for k, v in self.fields.items() if k not in RESERVED_COLUMNS}
        data["PartitionKey"] = self.partition_key
        data["RowKey"] = self.row_key
        return data

    def to_response(self) -> dict[str, Any]:
        """JSON-ready shape served by the read API."""
        data = self.to_table_entity()
        if self.timestamp is not None:
            data["Timestamp"] = self.timestamp.isoformat()
        return data

    def with_timestamp(self, timestamp: datetime) -> StoredEntity:
        """Create a copy stamped by the store."""
        return self.model_copy(update={"timestamp": timestamp})

    @classmethod
    def from_table_entity(
        cls,
        kind: EntityKind,
        entity: dict[str, Any],
        timestamp: datetime | None = None,
    ) -> StoredEntity:
        """Rebuild from a raw table row."""
        return cls(
            kind=kind,
            partition_key=entity["PartitionKey"],
            row_key=entity["RowKey"],
            fields={k: v for k, v in entity.items() if k not in RESERVED_COLUMNS},
            timestamp=timestamp,
        )


__all__ = [
    "RESERVED_COLUMNS",
    "StoredEntity",
]
