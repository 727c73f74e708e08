"""
Query Service

Read path for the HTTP API: full-table listing of one entity kind.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.contracts.records import EntityKind
from src.storage.protocols import EntityStore

logger = logging.getLogger(__name__)


class QueryFailed(Exception):
    """Reading a store failed; detail stays server-side."""

    def __init__(self, message: str, kind: str | None = None):
        self.kind = kind
        super().__init__(message)


class QueryResult(BaseModel):
    """Outcome of a listing: records on success, a generic message otherwise."""

    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    ok: bool
    records: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None

    @property
    def status_code(self) -> int:
        return 200 if self.ok else 500


class QueryService:
    """
    Lists every record of a kind.

    No filtering, ordering or pagination; the whole table is materialized.
    A missing table lists as empty and is not created by reads.
    """

    def __init__(self, stores: dict[EntityKind, EntityStore]):
        self._stores = stores

    async def list(self, kind: EntityKind) -> QueryResult:
        """
        Read all records of a kind.

        Args:
            kind: Entity kind to list

        Returns:
            QueryResult; never a partial listing

        Raises:
            KeyError: If no store is configured for the kind
        """
        store = self._stores[kind]
        logger.info(f"Processing request to get {kind.label}")

        try:
            records = [entity.to_response() async for entity in store.list_all()]
        except Exception as e:
            # Store errors and anything else raised while scanning or converting
            # rows get the same generic response; detail stays in the log
            return self._failed(kind, e)

        logger.debug(f"Listed {len(records)} {kind.label}")
        return QueryResult(kind=kind, ok=True, records=records)

    def _failed(self, kind: EntityKind, error: Exception) -> QueryResult:
        failure = QueryFailed(f"Failed to retrieve {kind.label}.", kind=kind.value)
        logger.error(f"{failure} ({type(error).__name__}: {error})", exc_info=error)
        return QueryResult(kind=kind, ok=False, error=str(failure))


__all__ = ["QueryFailed", "QueryResult", "QueryService"]
