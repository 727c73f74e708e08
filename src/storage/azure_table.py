"""
Azure Table Storage Entity Store

EntityStore implementation backed by an Azure Storage table, using the
async client from azure-data-tables.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError

from src.contracts.records import EntityKind
from src.contracts.storage import StoredEntity
from src.storage.errors import EntityRejected, StoreUnavailable, WriteConflict

if TYPE_CHECKING:
    from azure.data.tables.aio import TableClient

logger = logging.getLogger(__name__)


class AzureTableEntityStore:
    """
    EntityStore over one Azure table.

    Table creation is create-if-absent; a lost creation race surfaces as
    ResourceExistsError and is treated as success. Once creation succeeds the
    store skips further round-trips until a write reports the table missing.
    """

    def __init__(self, kind: EntityKind, client: TableClient):
        """
        Initialize the store.

        Args:
            kind: Entity kind held by this table
            client: Async TableClient bound to the table
        """
        self._kind = kind
        self._client = client
        self._known_to_exist = False

    @classmethod
    def from_connection_string(
        cls,
        kind: EntityKind,
        connection_string: str,
        table_name: str | None = None,
    ) -> AzureTableEntityStore:
        """
        Build a store from a storage account connection string.

        Args:
            kind: Entity kind held by the table
            connection_string: Storage account connection string
            table_name: Table name (defaults to the kind's value)
        """
        try:
            from azure.data.tables.aio import TableClient
        except ImportError as e:
            raise ImportError(
                "azure-data-tables package required. "
                "Install with: pip install azure-data-tables"
            ) from e

        client = TableClient.from_connection_string(
            connection_string,
            table_name=table_name or kind.value,
        )
        return cls(kind, client)

    @property
    def name(self) -> str:
        return self._client.table_name

    @property
    def kind(self) -> EntityKind:
        return self._kind

    async def ensure_exists(self) -> None:
        if self._known_to_exist:
            return
        try:
            await self._client.create_table()
            logger.info(f"Created table {self.name}")
        except ResourceExistsError:
            logger.debug(f"Table {self.name} already exists")
        except AzureError as e:
            raise StoreUnavailable(
                f"Failed to create table {self.name}: {e}", store=self.name
            ) from e
        self._known_to_exist = True

    async def put(self, entity: StoredEntity) -> None:
        try:
            await self._client.create_entity(entity=entity.to_table_entity())
        except ResourceExistsError as e:
            raise WriteConflict(
                f"Entity {entity.partition_key}/{entity.row_key} already exists",
                store=self.name,
                partition_key=entity.partition_key,
                row_key=entity.row_key,
            ) from e
        except ResourceNotFoundError as e:
            self._known_to_exist = False
            raise StoreUnavailable(
                f"Table {self.name} does not exist", store=self.name
            ) from e
        except AzureError as e:
            raise StoreUnavailable(
                f"Failed to write to table {self.name}: {e}", store=self.name
            ) from e
        except (TypeError, ValueError) as e:
            # The SDK serializes columns client-side and raises plain errors
            raise EntityRejected(
                f"Table {self.name} cannot store entity {entity.row_key}: {e}",
                store=self.name,
            ) from e

    async def list_all(self) -> AsyncIterator[StoredEntity]:
        try:
            async for row in self._client.list_entities():
                yield self._to_stored(row)
        except ResourceNotFoundError:
            logger.debug(f"Table {self.name} does not exist; nothing to list")
            return
        except AzureError as e:
            raise StoreUnavailable(
                f"Failed to read table {self.name}: {e}", store=self.name
            ) from e

    async def close(self) -> None:
        """Close the underlying client."""
        await self._client.close()

    def _to_stored(self, row: Any) -> StoredEntity:
        metadata = getattr(row, "metadata", None) or {}
        return StoredEntity.from_table_entity(
            self._kind,
            dict(row),
            timestamp=metadata.get("timestamp"),
        )


__all__ = ["AzureTableEntityStore"]
