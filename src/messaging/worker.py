"""
Ingestion Worker

Pulls messages from every configured channel and hands each one to the
pipeline for its entity kind.

A message whose handling returns (persisted or dropped) is completed. A
message whose handling raises is abandoned so the queue redelivers it.
"""

from __future__ import annotations

import asyncio
import logging

from src.ingestion.errors import PersistFailed
from src.ingestion.pipeline import IngestionPipeline, PipelineState
from src.messaging.models import QueueMessage, WorkerStats
from src.messaging.protocol import MessageSource, QueueError
from src.storage.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class IngestionWorker:
    """Routes channel messages to per-kind ingestion pipelines."""

    def __init__(
        self,
        source: MessageSource,
        pipelines: dict[str, IngestionPipeline],
        batch_size: int = 16,
        poll_interval_seconds: float = 1.0,
        worker_id: str = "ingest-worker",
    ):
        """
        Initialize the worker.

        Args:
            source: Queue to receive from
            pipelines: Channel name -> pipeline handling that channel
            batch_size: Messages received per poll and channel
            poll_interval_seconds: Sleep after a poll that found nothing
            worker_id: Name used in logs
        """
        if not pipelines:
            raise ValueError("At least one channel pipeline is required")
        self._source = source
        self._pipelines = pipelines
        self._batch_size = batch_size
        self._poll_interval = poll_interval_seconds
        self._worker_id = worker_id
        self.stats = WorkerStats()

    @property
    def channels(self) -> list[str]:
        return list(self._pipelines)

    async def run_once(self) -> int:
        """
        Poll every channel once and handle what arrived.

        Returns:
            Number of messages received
        """
        total = 0
        for channel, pipeline in self._pipelines.items():
            messages = await self._source.receive(channel, max_messages=self._batch_size)
            if not messages:
                continue
            total += len(messages)
            self.stats.received += len(messages)
            await asyncio.gather(*(self._dispatch(pipeline, m) for m in messages))
        return total

    async def run(self, stop_event: asyncio.Event | None = None) -> WorkerStats:
        """
        Poll until stop_event is set (or forever).

        Returns:
            Final counters
        """
        stop_event = stop_event or asyncio.Event()
        logger.info(f"Worker {self._worker_id} consuming from: {', '.join(self.channels)}")

        while not stop_event.is_set():
            try:
                received = await self.run_once()
            except QueueError as e:
                logger.error(f"Worker {self._worker_id} failed to poll: {e}")
                received = 0

            if received == 0:
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval)
                except asyncio.TimeoutError:
                    pass

        logger.info(
            f"Worker {self._worker_id} stopped: {self.stats.persisted} persisted, "
            f"{self.stats.dropped} dropped, {self.stats.failed} failed"
        )
        return self.stats

    async def _dispatch(self, pipeline: IngestionPipeline, message: QueueMessage) -> None:
        try:
            result = await pipeline.handle(message.body)
        except (StoreUnavailable, PersistFailed) as e:
            self.stats.failed += 1
            logger.warning(
                f"Message {message.message_id} on {message.channel} failed "
                f"(delivery {message.dequeue_count}): {e}"
            )
            await self._source.abandon(message, error=str(e))
            return
        except Exception as e:
            # Any other failure still settles the message
            self.stats.failed += 1
            logger.error(
                f"Message {message.message_id} on {message.channel} raised "
                f"unexpectedly (delivery {message.dequeue_count}): "
                f"{type(e).__name__}: {e}",
                exc_info=True,
            )
            await self._source.abandon(message, error=f"{type(e).__name__}: {e}")
            return

        if result.state == PipelineState.PERSISTED:
            self.stats.persisted += 1
        else:
            self.stats.dropped += 1
        await self._source.complete(message)


__all__ = ["IngestionWorker"]
