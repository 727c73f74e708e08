"""
Entity Store Factory.

Creates one EntityStore per entity kind for the configured backend.
"""

from __future__ import annotations

import logging

from src.contracts.records import EntityKind
from src.storage.memory import InMemoryEntityStore
from src.storage.protocols import EntityStore

logger = logging.getLogger(__name__)


def create_stores(
    backend: str = "memory",
    connection_string: str | None = None,
) -> dict[EntityKind, EntityStore]:
    """
    Create a store for every entity kind.

    Args:
        backend: "memory" or "azure"
        connection_string: Storage account connection string (azure only)

    Returns:
        Mapping of entity kind to its store

    Raises:
        ValueError: If the backend is unknown or misconfigured

    Example:
        stores = create_stores("memory")
        await stores[EntityKind.ORDERS].ensure_exists()
    """
    logger.info(f"Creating entity stores with backend: {backend}")

    if backend == "memory":
        return {kind: InMemoryEntityStore(kind) for kind in EntityKind}

    elif backend == "azure":
        if not connection_string:
            raise ValueError("azure backend requires a connection string")

        # Lazy import to avoid the Azure SDK when running in memory
        from src.storage.azure_table import AzureTableEntityStore

        return {
            kind: AzureTableEntityStore.from_connection_string(kind, connection_string)
            for kind in EntityKind
        }

    else:
        raise ValueError(f"Unknown storage backend: {backend}")


async def close_stores(stores: dict[EntityKind, EntityStore]) -> None:
    """Close stores that hold network clients."""
    for store in stores.values():
        close = getattr(store, "close", None)
        if close is not None:
            await close()


__all__ = ["create_stores", "close_stores"]
