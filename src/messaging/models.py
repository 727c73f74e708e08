"""
Messaging Models

Queue message envelope shared by all message sources.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from src.contracts.records import _now_utc


def _generate_id() -> str:
    return str(uuid4())


class QueueMessage(BaseModel):
    """
    A message received from a queue channel.

    Wraps the raw body with delivery metadata needed to complete or abandon it.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    message_id: str = Field(
        default_factory=_generate_id,
        description="Queue-assigned message ID",
    )
    channel: str = Field(..., description="Queue the message was received from")

    # Payload
    body: str = Field(..., description="Raw message text, handed to the pipeline as-is")

    # Delivery tracking
    dequeue_count: int = Field(
        default=1,
        ge=1,
        description="Times this message has been delivered (1-based)",
    )
    enqueued_at: datetime = Field(default_factory=_now_utc)
    pop_receipt: str | None = Field(
        default=None,
        description="Receipt required to delete the message (Azure queues)",
    )

    def redelivered(self) -> QueueMessage:
        """Create the copy seen on the next delivery."""
        return self.model_copy(
            update={"dequeue_count": self.dequeue_count + 1, "pop_receipt": None}
        )


class WorkerStats(BaseModel):
    """Counters kept by an ingestion worker."""

    received: int = Field(default=0, ge=0)
    persisted: int = Field(default=0, ge=0)
    dropped: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)


__all__ = ["QueueMessage", "WorkerStats"]
