"""
Unit tests for the FastAPI read API.
"""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from src.contracts.records import EntityKind
from src.service.app import create_app
from src.service.config import ServiceConfig
from tests.unit.fakes import FailingStore


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(backend="memory")


class TestReadApi:
    """Tests for GET /Orders, /Products, /Customers."""

    @pytest.mark.asyncio
    async def test_lists_ingested_orders(self, config, stores, order_pipeline):
        await order_pipeline.handle('{"Item":"Widget","Quantity":3}')

        with TestClient(create_app(config, stores)) as client:
            response = client.get("/Orders")

        assert response.status_code == 200
        [order] = response.json()
        assert order["Item"] == "Widget"
        assert order["Quantity"] == 3
        assert order["PartitionKey"] == "Orders"
        assert str(uuid.UUID(order["RowKey"])) == order["RowKey"]

    @pytest.mark.asyncio
    async def test_non_finite_price_never_reaches_listing(
        self, config, stores, order_pipeline, product_pipeline
    ):
        await order_pipeline.handle('{"Item":"Widget","Quantity":1,"Price":Infinity}')
        await order_pipeline.handle('{"Item":"Gadget","Quantity":2,"Price":4.5}')
        await product_pipeline.handle('{"Name":"Lamp","Price":1e999}')

        with TestClient(create_app(config, stores)) as client:
            orders = client.get("/Orders")
            products = client.get("/Products")

        assert orders.status_code == 200
        assert [o["Item"] for o in orders.json()] == ["Gadget"]
        assert products.status_code == 200
        assert products.json() == []

    def test_customers_before_any_ingest(self, config, stores):
        with TestClient(create_app(config, stores)) as client:
            response = client.get("/Customers")

        assert response.status_code == 200
        assert response.json() == []
        assert not stores[EntityKind.CUSTOMERS].exists

    def test_store_failure_is_plain_text_500(self, config, stores):
        stores[EntityKind.PRODUCTS] = FailingStore(EntityKind.PRODUCTS, fail_list=True)

        with TestClient(create_app(config, stores)) as client:
            response = client.get("/Products")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Failed to retrieve products."

    def test_owns_stores_when_none_given(self, config):
        with TestClient(create_app(config)) as client:
            assert client.get("/Orders").json() == []
            assert client.get("/Products").json() == []

    def test_unknown_route(self, config, stores):
        with TestClient(create_app(config, stores)) as client:
            assert client.get("/Invoices").status_code == 404

    def test_post_not_allowed(self, config, stores):
        with TestClient(create_app(config, stores)) as client:
            assert client.post("/Orders", json={}).status_code == 405


class TestServiceEndpoints:
    def test_health(self, config, stores):
        with TestClient(create_app(config, stores)) as client:
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_root(self, config, stores):
        with TestClient(create_app(config, stores)) as client:
            body = client.get("/").json()
        assert body["name"] == "queue-ingest"
        assert body["endpoints"]["orders"] == "/Orders"
