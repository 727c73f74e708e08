"""
Queue Messaging

MessageSource protocol, its implementations and the ingestion worker.

Implementations:
- InMemoryQueue: For unit testing and local runs (no external dependencies)
- AzureQueueSource: For production (Azure Storage queues, imported lazily)
"""

from src.messaging.memory import InMemoryQueue
from src.messaging.models import QueueMessage, WorkerStats
from src.messaging.protocol import MessageSource, QueueError
from src.messaging.worker import IngestionWorker

__all__ = [
    "InMemoryQueue",
    "IngestionWorker",
    "MessageSource",
    "QueueError",
    "QueueMessage",
    "WorkerStats",
]
