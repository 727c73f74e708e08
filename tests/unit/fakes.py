"""Test doubles shared across unit tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

from src.contracts.records import EntityKind
from src.contracts.storage import StoredEntity
from src.storage.errors import StoreUnavailable
from src.storage.memory import InMemoryEntityStore


class FailingStore(InMemoryEntityStore):
    """In-memory store whose operations can be switched to fail."""

    def __init__(
        self,
        kind: EntityKind,
        fail_ensure: bool = False,
        fail_put: bool = False,
        fail_list: bool = False,
    ):
        super().__init__(kind)
        self.fail_ensure = fail_ensure
        self.fail_put = fail_put
        self.fail_list = fail_list

    async def ensure_exists(self) -> None:
        if self.fail_ensure:
            raise StoreUnavailable("backend unreachable", store=self.name)
        await super().ensure_exists()

    async def put(self, entity: StoredEntity) -> None:
        if self.fail_put:
            raise StoreUnavailable("backend unreachable", store=self.name)
        await super().put(entity)

    async def list_all(self) -> AsyncIterator[StoredEntity]:
        if self.fail_list:
            raise StoreUnavailable("backend unreachable", store=self.name)
        async for entity in super().list_all():
            yield entity


async def collect(store) -> list[StoredEntity]:
    """Materialize a store's listing."""
    return [entity async for entity in store.list_all()]
