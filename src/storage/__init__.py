"""
Entity Storage

EntityStore protocol and its implementations.

Implementations:
- InMemoryEntityStore: For unit testing and local runs (no external dependencies)
- AzureTableEntityStore: For production (Azure Table Storage, imported lazily)
"""

from src.storage.errors import EntityRejected, StoreError, StoreUnavailable, WriteConflict
from src.storage.factory import close_stores, create_stores
from src.storage.memory import InMemoryEntityStore
from src.storage.protocols import EntityStore

__all__ = [
    "EntityRejected",
    "EntityStore",
    "InMemoryEntityStore",
    "StoreError",
    "StoreUnavailable",
    "WriteConflict",
    "create_stores",
    "close_stores",
]
