"""
Ingestion Pipeline

Per-message state machine: decode, assign identity, persist.

States:
    received -> decoded -> identified -> persisted   (success)
    received -> dropped                              (decode failure)
    received -> decoded -> identified -> failed      (store failure, raised)

Decode failures are logged and swallowed so a malformed message is consumed
rather than redelivered forever. Store failures after a successful decode
propagate so the queue can redeliver the message.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from src.contracts.records import EntityKind, EntityRecord
from src.contracts.storage import StoredEntity
from src.ingestion.decoder import MessageDecoder
from src.ingestion.errors import PersistFailed
from src.ingestion.identity import IdentityAssigner
from src.storage.errors import StoreError
from src.storage.protocols import EntityStore

logger = logging.getLogger(__name__)

# Longest payload excerpt written to logs
_PREVIEW_CHARS = 200


class PipelineState(str, Enum):
    """Stage a message reached in the pipeline."""

    RECEIVED = "received"
    DECODED = "decoded"
    IDENTIFIED = "identified"
    PERSISTED = "persisted"
    DROPPED = "dropped"
    FAILED = "failed"


class IngestionResult(BaseModel):
    """Outcome of handling one message that did not raise."""

    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    state: PipelineState
    entity: StoredEntity | None = None
    error: str | None = None

    @property
    def persisted(self) -> bool:
        return self.state == PipelineState.PERSISTED


class IngestionPipeline:
    """
    Ingests raw messages of one entity kind into that kind's store.

    Holds no per-message state, so one instance can serve any number of
    concurrent handle() calls.
    """

    def __init__(
        self,
        decoder: MessageDecoder,
        store: EntityStore,
        partition_key: str | None = None,
        assigner: IdentityAssigner | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            decoder: Decoder for this kind's payloads
            store: Destination store
            partition_key: Fixed partition name (defaults to the kind's value)
            assigner: Identity assigner (built from partition_key if omitted)
        """
        self._decoder = decoder
        self._store = store
        self._kind = decoder.record_type.kind
        self._assigner = assigner or IdentityAssigner(partition_key or self._kind.value)

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def store(self) -> EntityStore:
        return self._store

    async def handle(self, raw: str | bytes) -> IngestionResult:
        """
        Handle one raw message to completion.

        Args:
            raw: Message body

        Returns:
            IngestionResult in state PERSISTED or DROPPED

        Raises:
            StoreUnavailable: If the store cannot be provisioned
            PersistFailed: If the write fails (chained from the store error)
        """
        kind = self._kind.value
        logger.info(
            f"{PipelineState.RECEIVED.value}: {kind} message ({len(raw)} chars): "
            f"{_preview(raw)}"
        )

        await self._store.ensure_exists()

        decoded = self._decoder.decode(raw)
        if not decoded.ok:
            logger.error(
                f"{PipelineState.DROPPED.value}: failed to decode {kind} message: "
                f"{decoded.error}"
            )
            return IngestionResult(
                kind=self._kind,
                state=PipelineState.DROPPED,
                error=str(decoded.error),
            )
        logger.debug(f"{PipelineState.DECODED.value}: {kind} message")

        entity = self._identify(decoded.record)
        logger.info(
            f"{PipelineState.IDENTIFIED.value}: saving {kind} entity with RowKey: "
            f"{entity.row_key}"
        )

        try:
            await self._store.put(entity)
        except StoreError as e:
            logger.error(
                f"{PipelineState.FAILED.value}: could not save {kind} entity "
                f"{entity.row_key}: {e}"
            )
            raise PersistFailed(
                f"Failed to persist {kind} entity {entity.row_key}: {e}",
                kind=kind,
                row_key=entity.row_key,
            ) from e

        logger.info(
            f"{PipelineState.PERSISTED.value}: {kind} entity {entity.row_key} "
            f"saved to table {self._store.name}"
        )
        return IngestionResult(kind=self._kind, state=PipelineState.PERSISTED, entity=entity)

    def _identify(self, record: EntityRecord) -> StoredEntity:
        return self._assigner.assign(record)


def _preview(raw: str | bytes) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text


__all__ = ["IngestionPipeline", "IngestionResult", "PipelineState"]
