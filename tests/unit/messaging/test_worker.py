"""
Unit tests for IngestionWorker.
"""

from __future__ import annotations

import asyncio

import pytest

from src.contracts.records import EntityKind, Order, Product
from src.contracts.storage import StoredEntity
from src.ingestion.decoder import MessageDecoder
from src.ingestion.pipeline import IngestionPipeline
from src.messaging import InMemoryQueue, IngestionWorker
from src.storage.memory import InMemoryEntityStore
from tests.unit.fakes import FailingStore


class BrokenStore(InMemoryEntityStore):
    """Store whose writes raise an error outside the StoreError hierarchy."""

    async def put(self, entity: StoredEntity) -> None:
        raise TypeError("3000000000 is too large to be cast to type EdmType.INT32.")


@pytest.fixture
def queue() -> InMemoryQueue:
    return InMemoryQueue(max_dequeue_count=2)


@pytest.fixture
def worker(queue, order_pipeline, product_pipeline) -> IngestionWorker:
    return IngestionWorker(
        queue,
        {"processed-orders": order_pipeline, "product-queue": product_pipeline},
        poll_interval_seconds=0.01,
    )


class TestRunOnce:
    """Tests for a single polling pass."""

    @pytest.mark.asyncio
    async def test_persists_and_completes(self, worker, queue, stores):
        await queue.send("processed-orders", '{"Item":"Widget","Quantity":3}')
        await queue.send("product-queue", '{"Name":"Lamp","Price":20}')

        received = await worker.run_once()

        assert received == 2
        assert worker.stats.persisted == 2
        assert len(stores[EntityKind.ORDERS]) == 1
        assert len(stores[EntityKind.PRODUCTS]) == 1
        assert queue.completed_count("processed-orders") == 1
        assert queue.in_flight_count("product-queue") == 0

    @pytest.mark.asyncio
    async def test_malformed_message_is_completed(self, worker, queue, stores):
        await queue.send("product-queue", "not-json")

        await worker.run_once()

        assert worker.stats.dropped == 1
        assert queue.completed_count("product-queue") == 1
        assert queue.pending_count("product-queue") == 0
        assert len(stores[EntityKind.PRODUCTS]) == 0

    @pytest.mark.asyncio
    async def test_store_failure_abandons_for_redelivery(self, queue):
        store = FailingStore(EntityKind.ORDERS, fail_put=True)
        worker = IngestionWorker(
            queue, {"orders": IngestionPipeline(MessageDecoder(Order), store)}
        )
        await queue.send("orders", '{"Item":"Widget","Quantity":3}')

        await worker.run_once()

        assert worker.stats.failed == 1
        assert queue.completed_count("orders") == 0
        [redelivered] = await queue.receive("orders")
        assert redelivered.dequeue_count == 2

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, queue):
        store = FailingStore(EntityKind.PRODUCTS, fail_ensure=True)
        worker = IngestionWorker(
            queue, {"products": IngestionPipeline(MessageDecoder(Product), store)}
        )
        await queue.send("products", '{"Name":"Lamp","Price":20}')

        await worker.run_once()
        store.fail_ensure = False
        await worker.run_once()

        assert worker.stats.failed == 1
        assert worker.stats.persisted == 1
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_one_failure_does_not_affect_others(self, queue, stores):
        failing = FailingStore(EntityKind.ORDERS, fail_put=True)
        worker = IngestionWorker(
            queue,
            {
                "orders": IngestionPipeline(MessageDecoder(Order), failing),
                "products": IngestionPipeline(
                    MessageDecoder(Product), stores[EntityKind.PRODUCTS]
                ),
            },
        )
        await queue.send("orders", '{"Item":"Widget","Quantity":3}')
        await queue.send("products", '{"Name":"Lamp","Price":20}')

        await worker.run_once()

        assert worker.stats.failed == 1
        assert worker.stats.persisted == 1

    def test_requires_pipelines(self, queue):
        with pytest.raises(ValueError):
            IngestionWorker(queue, {})


class TestRun:
    """Tests for the polling loop."""

    @pytest.mark.asyncio
    async def test_stops_on_event(self, worker, queue, stores):
        stop = asyncio.Event()
        await queue.send("processed-orders", '{"Item":"Widget","Quantity":3}')

        task = asyncio.create_task(worker.run(stop))
        for _ in range(100):
            if worker.stats.persisted:
                break
            await asyncio.sleep(0.01)
        stop.set()
        stats = await asyncio.wait_for(task, timeout=2)

        assert stats.persisted == 1
        assert len(stores[EntityKind.ORDERS]) == 1

    @pytest.mark.asyncio
    async def test_poll_errors_do_not_stop_loop(self, worker, queue):
        stop = asyncio.Event()
        await queue.close()

        task = asyncio.create_task(worker.run(stop))
        await asyncio.sleep(0.05)
        assert not task.done()
        stop.set()
        await asyncio.wait_for(task, timeout=2)

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_stop_loop(self, queue, stores):
        broken = BrokenStore(EntityKind.ORDERS)
        worker = IngestionWorker(
            queue,
            {
                "orders": IngestionPipeline(MessageDecoder(Order), broken),
                "products": IngestionPipeline(
                    MessageDecoder(Product), stores[EntityKind.PRODUCTS]
                ),
            },
            poll_interval_seconds=0.01,
        )
        stop = asyncio.Event()
        await queue.send("orders", '{"Item":"Big","Quantity":3}')

        task = asyncio.create_task(worker.run(stop))
        await asyncio.sleep(0.05)
        await queue.send("products", '{"Name":"Lamp","Price":20}')
        for _ in range(100):
            if worker.stats.persisted:
                break
            await asyncio.sleep(0.01)

        assert not task.done()
        stop.set()
        stats = await asyncio.wait_for(task, timeout=2)

        assert stats.persisted == 1
        assert stats.failed >= 1
        assert len(stores[EntityKind.PRODUCTS]) == 1
        # Redelivered until parked
        assert [m.body for m in queue.poison_messages("orders")] == [
            '{"Item":"Big","Quantity":3}'
        ]
