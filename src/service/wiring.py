"""
Service Wiring

Builds the per-kind bindings, pipelines and message source from configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.contracts.records import RECORD_TYPES, EntityKind, EntityRecord
from src.ingestion.decoder import MessageDecoder
from src.ingestion.pipeline import IngestionPipeline
from src.messaging.memory import InMemoryQueue
from src.messaging.protocol import MessageSource
from src.service.config import ServiceConfig
from src.storage.protocols import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityBinding:
    """Everything that differs between entity kinds."""

    kind: EntityKind
    record_type: type[EntityRecord]
    partition_key: str
    channel: str


def build_bindings(config: ServiceConfig) -> list[EntityBinding]:
    """One binding per entity kind."""
    return [
        EntityBinding(
            kind=kind,
            record_type=RECORD_TYPES[kind],
            partition_key=kind.value,
            channel=config.queue_name(kind),
        )
        for kind in EntityKind
    ]


def build_pipelines(
    config: ServiceConfig,
    stores: dict[EntityKind, EntityStore],
) -> dict[str, IngestionPipeline]:
    """
    Build a pipeline per binding, keyed by the channel it consumes.

    Args:
        config: Service configuration
        stores: Store for every entity kind

    Returns:
        Channel name -> pipeline
    """
    pipelines = {}
    for binding in build_bindings(config):
        pipelines[binding.channel] = IngestionPipeline(
            decoder=MessageDecoder(binding.record_type),
            store=stores[binding.kind],
            partition_key=binding.partition_key,
        )
        logger.debug(f"Bound channel {binding.channel} to {binding.kind.value}")
    return pipelines


def create_source(config: ServiceConfig) -> MessageSource:
    """Create the message source for the configured backend."""
    if config.backend == "memory":
        return InMemoryQueue(max_dequeue_count=config.max_dequeue_count)

    # Lazy import to avoid the Azure SDK when running in memory
    from src.messaging.azure_queue import AzureQueueSource

    return AzureQueueSource(
        config.connection_string or "",
        visibility_timeout_seconds=config.visibility_timeout_seconds,
        message_encoding=config.message_encoding,
        max_dequeue_count=config.max_dequeue_count,
    )


__all__ = ["EntityBinding", "build_bindings", "build_pipelines", "create_source"]
