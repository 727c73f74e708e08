"""
Azure Storage Queue Message Source

MessageSource over Azure Storage queues using the async client from
azure-storage-queue. An abandoned message reappears once its visibility
timeout expires; after max_dequeue_count deliveries it is moved to the
"<queue>-poison" queue, the same convention the Functions queue trigger uses.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from azure.core.exceptions import AzureError, ResourceNotFoundError

from src.contracts.records import _now_utc
from src.messaging.models import QueueMessage
from src.messaging.protocol import QueueError

if TYPE_CHECKING:
    from azure.storage.queue.aio import QueueClient

logger = logging.getLogger(__name__)


def poison_queue_name(channel: str) -> str:
    """Queue that receives messages which exhausted their deliveries."""
    return f"{channel}-poison"


class AzureQueueSource:
    """
    Receives from one Azure queue per channel.

    Clients are created lazily on first use of a channel.
    """

    def __init__(
        self,
        connection_string: str,
        visibility_timeout_seconds: int = 30,
        message_encoding: str = "text",
        max_dequeue_count: int = 5,
    ):
        """
        Initialize the source.

        Args:
            connection_string: Storage account connection string
            visibility_timeout_seconds: Time a received message stays hidden
            message_encoding: "text" or "base64" (the Azure Functions convention)
            max_dequeue_count: Deliveries before an abandoned message is poisoned
        """
        self._connection_string = connection_string
        self._visibility_timeout = visibility_timeout_seconds
        self._encoding = message_encoding
        self._max_dequeue_count = max_dequeue_count
        self._clients: dict[str, QueueClient] = {}

    def _client(self, channel: str) -> QueueClient:
        client = self._clients.get(channel)
        if client is None:
            client = self._create_client(channel)
            self._clients[channel] = client
        return client

    def _create_client(self, channel: str) -> QueueClient:
        try:
            from azure.storage.queue import TextBase64DecodePolicy, TextBase64EncodePolicy
            from azure.storage.queue.aio import QueueClient
        except ImportError as e:
            raise ImportError(
                "azure-storage-queue package required. "
                "Install with: pip install azure-storage-queue"
            ) from e

        kwargs: dict[str, Any] = {}
        if self._encoding == "base64":
            kwargs["message_encode_policy"] = TextBase64EncodePolicy()
            kwargs["message_decode_policy"] = TextBase64DecodePolicy()

        return QueueClient.from_connection_string(
            self._connection_string,
            queue_name=channel,
            **kwargs,
        )

    async def receive(self, channel: str, max_messages: int = 16) -> list[QueueMessage]:
        client = self._client(channel)
        received: list[QueueMessage] = []
        try:
            async for msg in client.receive_messages(
                max_messages=max_messages,
                visibility_timeout=self._visibility_timeout,
            ):
                received.append(
                    QueueMessage(
                        message_id=msg.id,
                        channel=channel,
                        body=msg.content or "",
                        dequeue_count=max(msg.dequeue_count or 1, 1),
                        enqueued_at=msg.inserted_on or _now_utc(),
                        pop_receipt=msg.pop_receipt,
                    )
                )
                if len(received) >= max_messages:
                    break
        except ResourceNotFoundError:
            logger.warning(f"Queue {channel} does not exist")
            return []
        except AzureError as e:
            raise QueueError(f"Failed to receive from queue {channel}: {e}") from e
        return received

    async def complete(self, message: QueueMessage) -> None:
        client = self._client(message.channel)
        try:
            await client.delete_message(message.message_id, pop_receipt=message.pop_receipt)
        except AzureError as e:
            raise QueueError(
                f"Failed to delete message {message.message_id} from {message.channel}: {e}"
            ) from e

    async def abandon(self, message: QueueMessage, error: str | None = None) -> None:
        if message.dequeue_count < self._max_dequeue_count:
            logger.warning(
                f"Abandoned message {message.message_id} on {message.channel} "
                f"(delivery {message.dequeue_count}/{self._max_dequeue_count}); it becomes "
                f"visible again after {self._visibility_timeout}s (error: {error or 'none'})"
            )
            return

        poison_channel = poison_queue_name(message.channel)
        await self._send_to_poison(poison_channel, message.body)
        await self.complete(message)
        logger.warning(
            f"Moved message {message.message_id} on {message.channel} to {poison_channel} "
            f"after {message.dequeue_count} deliveries (error: {error or 'none'})"
        )

    async def _send_to_poison(self, poison_channel: str, body: str) -> None:
        client = self._client(poison_channel)
        try:
            try:
                await client.send_message(body)
            except ResourceNotFoundError:
                await client.create_queue()
                await client.send_message(body)
        except AzureError as e:
            raise QueueError(f"Failed to move message to {poison_channel}: {e}") from e

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()


__all__ = ["AzureQueueSource", "poison_queue_name"]
