"""
Unit tests for QueryService.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import pytest

from src.contracts.records import EntityKind
from src.contracts.storage import StoredEntity
from src.query.service import QueryService
from src.storage.memory import InMemoryEntityStore
from tests.unit.fakes import FailingStore


class CorruptStore(InMemoryEntityStore):
    """Store whose scan fails with an error outside the StoreError hierarchy."""

    async def list_all(self) -> AsyncIterator[StoredEntity]:
        raise RuntimeError("row decode failed")
        yield  # pragma: no cover


class TestList:
    """Tests for QueryService.list."""

    @pytest.mark.asyncio
    async def test_lists_ingested_records(self, stores, order_pipeline):
        await order_pipeline.handle('{"Item":"Widget","Quantity":3}')
        await order_pipeline.handle('{"Item":"Gadget","Quantity":1,"Price":9.99}')

        result = await QueryService(stores).list(EntityKind.ORDERS)

        assert result.ok
        assert result.status_code == 200
        assert len(result.records) == 2
        by_item = {r["Item"]: r for r in result.records}
        assert by_item["Widget"]["Quantity"] == 3
        assert by_item["Gadget"]["Price"] == 9.99
        for record in result.records:
            assert record["PartitionKey"] == "Orders"
            assert len(record["RowKey"]) == 36
            assert "Timestamp" in record

    @pytest.mark.asyncio
    async def test_missing_store_is_empty_and_not_created(self, stores):
        result = await QueryService(stores).list(EntityKind.CUSTOMERS)

        assert result.ok
        assert result.records == []
        assert not stores[EntityKind.CUSTOMERS].exists

    @pytest.mark.asyncio
    async def test_kinds_are_isolated(self, stores, order_pipeline):
        await order_pipeline.handle('{"Item":"Widget","Quantity":3}')
        result = await QueryService(stores).list(EntityKind.PRODUCTS)
        assert result.records == []

    @pytest.mark.asyncio
    async def test_store_failure_is_generic(self, caplog: pytest.LogCaptureFixture):
        service = QueryService({EntityKind.PRODUCTS: FailingStore(EntityKind.PRODUCTS, fail_list=True)})

        with caplog.at_level(logging.ERROR, logger="src.query.service"):
            result = await service.list(EntityKind.PRODUCTS)

        assert not result.ok
        assert result.status_code == 500
        assert result.records == []
        assert result.error == "Failed to retrieve products."
        assert "backend unreachable" not in result.error
        # Detail stays in the server log
        assert any("backend unreachable" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic(self, caplog: pytest.LogCaptureFixture):
        service = QueryService({EntityKind.ORDERS: CorruptStore(EntityKind.ORDERS)})

        with caplog.at_level(logging.ERROR, logger="src.query.service"):
            result = await service.list(EntityKind.ORDERS)

        assert not result.ok
        assert result.status_code == 500
        assert result.error == "Failed to retrieve orders."
        assert any("RuntimeError: row decode failed" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_unknown_kind(self):
        with pytest.raises(KeyError):
            await QueryService({}).list(EntityKind.ORDERS)
