"""
Queue Ingestion

Decode, identify and persist records delivered by the entity queues.

Usage:
    from src.ingestion import IngestionPipeline, MessageDecoder
    from src.contracts.records import Order

    pipeline = IngestionPipeline(MessageDecoder(Order), store)
    result = await pipeline.handle('{"Item": "Widget", "Quantity": 3}')
"""

from src.ingestion.decoder import DecodeResult, MessageDecoder
from src.ingestion.errors import DecodeFailed, IngestionError, PersistFailed
from src.ingestion.identity import IdentityAssigner
from src.ingestion.pipeline import IngestionPipeline, IngestionResult, PipelineState

__all__ = [
    "DecodeFailed",
    "DecodeResult",
    "IdentityAssigner",
    "IngestionError",
    "IngestionPipeline",
    "IngestionResult",
    "MessageDecoder",
    "PersistFailed",
    "PipelineState",
]
