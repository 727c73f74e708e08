"""
Message Source Protocol

The seam between the ingestion worker and whatever queue delivers messages.
Delivery guarantees (at-least-once, visibility timeouts, poison handling)
belong to the implementation behind this protocol.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.messaging.models import QueueMessage


class QueueError(Exception):
    """Queue operation failed or the source is closed."""


@runtime_checkable
class MessageSource(Protocol):
    """Pull-based queue consumer."""

    async def receive(self, channel: str, max_messages: int = 16) -> list[QueueMessage]:
        """
        Receive up to max_messages from a channel without blocking.

        Received messages stay invisible to other consumers until completed
        or abandoned.
        """
        ...

    async def complete(self, message: QueueMessage) -> None:
        """Remove a handled message from the queue for good."""
        ...

    async def abandon(self, message: QueueMessage, error: str | None = None) -> None:
        """Give a message back for redelivery."""
        ...

    async def close(self) -> None:
        """Release connections."""
        ...


__all__ = ["MessageSource", "QueueError"]
