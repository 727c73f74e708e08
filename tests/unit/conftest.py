"""
Pytest configuration and shared fixtures for unit tests.

Every fixture builds fresh in-memory collaborators; no test touches Azure.
"""

import os

import pytest

from src.contracts.records import Customer, EntityKind, Order, Product
from src.ingestion.decoder import MessageDecoder
from src.ingestion.pipeline import IngestionPipeline
from src.storage.memory import InMemoryEntityStore


def pytest_configure(config):
    """Keep developer environment variables from leaking into config tests."""
    for name in ("INGEST_BACKEND", "INGEST_CONNECTION_STRING", "connection"):
        os.environ.pop(name, None)


@pytest.fixture
def stores() -> dict[EntityKind, InMemoryEntityStore]:
    """Fresh in-memory store for every kind."""
    return {kind: InMemoryEntityStore(kind) for kind in EntityKind}


@pytest.fixture
def order_pipeline(stores) -> IngestionPipeline:
    return IngestionPipeline(MessageDecoder(Order), stores[EntityKind.ORDERS])


@pytest.fixture
def product_pipeline(stores) -> IngestionPipeline:
    return IngestionPipeline(MessageDecoder(Product), stores[EntityKind.PRODUCTS])


@pytest.fixture
def customer_pipeline(stores) -> IngestionPipeline:
    return IngestionPipeline(MessageDecoder(Customer), stores[EntityKind.CUSTOMERS])
