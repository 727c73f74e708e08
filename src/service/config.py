"""
Ingest Service Configuration

Configuration settings using pydantic-settings for environment variable support.
"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.contracts.records import EntityKind


class ServiceConfig(BaseSettings):
    """
    Configuration for the ingest service.

    Reads from environment variables with INGEST_ prefix. The storage
    connection string is also read from the bare ``connection`` variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Server Identity
    server_name: str = Field(
        default="queue-ingest",
        description="Server name for identification",
    )
    server_version: str = Field(
        default="0.1.0",
        description="Server version",
    )

    # Storage
    backend: Literal["memory", "azure"] = Field(
        default="memory",
        description="Storage and queue backend: memory (local/tests) or azure",
    )
    connection_string: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "connection_string",
            "INGEST_CONNECTION_STRING",
            "connection",
        ),
        description="Storage account connection string",
    )
    image_container: str = Field(
        default="product-images",
        description="Blob container provisioned for product images",
    )
    provision_image_container: bool = Field(
        default=True,
        description="Create the image container at startup (azure backend)",
    )

    # HTTP Transport
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind for HTTP transport",
    )
    port: int = Field(
        default=7071,
        description="Port for HTTP transport",
    )

    # Queues
    orders_queue: str = Field(default="processed-orders")
    products_queue: str = Field(default="product-queue")
    customers_queue: str = Field(default="customer-queue")
    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Sleep between empty polls",
    )
    batch_size: int = Field(
        default=16,
        ge=1,
        le=32,
        description="Messages received per poll and channel",
    )
    visibility_timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="How long a received message stays hidden from other consumers",
    )
    message_encoding: Literal["text", "base64"] = Field(
        default="text",
        description="Queue message body encoding",
    )
    max_dequeue_count: int = Field(
        default=5,
        ge=1,
        description="Deliveries before an abandoned message is moved to poison",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @model_validator(mode="after")
    def _require_connection_for_azure(self) -> ServiceConfig:
        if self.backend == "azure" and not self.connection_string:
            raise ValueError("azure backend requires a connection string")
        return self

    def queue_name(self, kind: EntityKind) -> str:
        """Queue channel carrying messages for an entity kind."""
        return {
            EntityKind.ORDERS: self.orders_queue,
            EntityKind.PRODUCTS: self.products_queue,
            EntityKind.CUSTOMERS: self.customers_queue,
        }[kind]
