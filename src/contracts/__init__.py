"""
Queue Ingest Contracts Package

Data contracts shared by the ingestion pipeline, stores and read API:

- records: Entity kinds and candidate record schemas (Order, Product, Customer)
- storage: StoredEntity, the identified table row

Usage:
    from src.contracts import EntityKind, Order, StoredEntity
"""

from src.contracts.records import (
    RECORD_TYPES,
    Customer,
    EntityKind,
    EntityRecord,
    Order,
    Product,
)
from src.contracts.storage import RESERVED_COLUMNS, StoredEntity

__all__ = [
    "RECORD_TYPES",
    "RESERVED_COLUMNS",
    "Customer",
    "EntityKind",
    "EntityRecord",
    "Order",
    "Product",
    "StoredEntity",
]
