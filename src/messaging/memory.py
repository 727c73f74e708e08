"""
In-Memory Message Queue.

A simple in-memory MessageSource for unit testing and local runs. Only code
in the same process can send to it, so a standalone worker on the memory
backend has nothing to consume.
NOT suitable for production use - no persistence, no distributed support.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field

from src.messaging.models import QueueMessage
from src.messaging.protocol import QueueError

logger = logging.getLogger(__name__)


@dataclass
class ChannelState:
    """State for a single channel."""

    # Messages waiting to be received
    pending: deque[QueueMessage] = field(default_factory=deque)

    # Received but not yet completed/abandoned (message_id -> message)
    in_flight: dict[str, QueueMessage] = field(default_factory=dict)

    # Messages abandoned too many times
    poison: list[QueueMessage] = field(default_factory=list)

    # Number of messages completed
    completed: int = 0


class InMemoryQueue:
    """
    In-memory implementation of MessageSource.

    Features:
    - Independent channels created lazily on first use
    - In-flight tracking between receive and complete/abandon
    - Abandoned messages are redelivered until max_dequeue_count, then
      parked on the channel's poison list

    Limitations:
    - No persistence (lost on restart)
    - Single process only (not distributed)
    - No visibility timeout: an in-flight message stays in flight until
      completed or abandoned
    """

    def __init__(self, max_dequeue_count: int = 5):
        """
        Initialize the in-memory queue.

        Args:
            max_dequeue_count: Deliveries before a message is parked as poison
        """
        self._max_dequeue_count = max_dequeue_count
        self._channels: dict[str, ChannelState] = defaultdict(ChannelState)
        self._lock = asyncio.Lock()
        self._closed = False

    # =========================================================================
    # Send
    # =========================================================================

    async def send(self, channel: str, body: str) -> str:
        """Add a message to a channel and return its ID."""
        if self._closed:
            raise QueueError("Queue is closed")

        message = QueueMessage(channel=channel, body=body)
        async with self._lock:
            self._channels[channel].pending.append(message)

        logger.debug(f"Enqueued message {message.message_id} on {channel}")
        return message.message_id

    # =========================================================================
    # MessageSource
    # =========================================================================

    async def receive(self, channel: str, max_messages: int = 16) -> list[QueueMessage]:
        if self._closed:
            raise QueueError("Queue is closed")

        received: list[QueueMessage] = []
        async with self._lock:
            state = self._channels[channel]
            while state.pending and len(received) < max_messages:
                message = state.pending.popleft()
                state.in_flight[message.message_id] = message
                received.append(message)

        return received

    async def complete(self, message: QueueMessage) -> None:
        async with self._lock:
            state = self._channels[message.channel]
            if state.in_flight.pop(message.message_id, None) is None:
                raise QueueError(f"Message {message.message_id} is not in flight")
            state.completed += 1
        logger.debug(f"Completed message {message.message_id}")

    async def abandon(self, message: QueueMessage, error: str | None = None) -> None:
        async with self._lock:
            state = self._channels[message.channel]
            if state.in_flight.pop(message.message_id, None) is None:
                raise QueueError(f"Message {message.message_id} is not in flight")

            if message.dequeue_count < self._max_dequeue_count:
                state.pending.append(message.redelivered())
                logger.debug(
                    f"Requeued message {message.message_id} "
                    f"(delivery {message.dequeue_count}/{self._max_dequeue_count})"
                )
            else:
                state.poison.append(message)
                logger.warning(
                    f"Moved message {message.message_id} on {message.channel} to poison "
                    f"(error: {error or 'none'})"
                )

    async def close(self) -> None:
        self._closed = True
        logger.info("In-memory queue closed")

    # =========================================================================
    # Queue Status
    # =========================================================================

    def pending_count(self, channel: str) -> int:
        return len(self._channels[channel].pending)

    def in_flight_count(self, channel: str) -> int:
        return len(self._channels[channel].in_flight)

    def poison_messages(self, channel: str) -> list[QueueMessage]:
        return list(self._channels[channel].poison)

    def completed_count(self, channel: str) -> int:
        return self._channels[channel].completed

    def reset(self) -> None:
        """Reset all state (testing only)."""
        self._channels.clear()
        self._closed = False


__all__ = ["InMemoryQueue"]
