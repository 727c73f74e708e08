"""
Record Contracts

Candidate record schemas for each entity kind ingested from the queues.

Candidates are what a queue payload decodes into: domain fields only, no
identity. Field names are PascalCase because they are stored verbatim as
table columns and returned verbatim by the read API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Largest integer a table column stores as Edm.Int32
TABLE_INT32_MAX = 2**31 - 1


def _now_utc() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# Entity Kinds
# =============================================================================


class EntityKind(str, Enum):
    """Entity kinds; each value doubles as table name and partition name."""

    ORDERS = "Orders"
    PRODUCTS = "Products"
    CUSTOMERS = "Customers"

    @property
    def label(self) -> str:
        """Lower-case plural used in log and error messages."""
        return self.value.lower()


# =============================================================================
# Candidate Records
# =============================================================================


class EntityRecord(BaseModel):
    """
    Base class for decoded candidate records.

    Strict mode: numeric strings, floats for integers and booleans for
    numbers are rejected instead of coerced, and so are NaN and infinities.
    Unknown keys (including any caller-supplied PartitionKey/RowKey) are
    ignored.
    """

    model_config = ConfigDict(
        frozen=True, strict=True, extra="ignore", allow_inf_nan=False
    )

    kind: ClassVar[EntityKind]

    def to_fields(self) -> dict[str, Any]:
        """Domain columns for storage, with unset optionals left out."""
        return self.model_dump(mode="json", exclude_none=True)


class Order(EntityRecord):
    """An order for a quantity of one item."""

    kind: ClassVar[EntityKind] = EntityKind.ORDERS

    Item: str = Field(..., min_length=1, max_length=255)
    Quantity: int = Field(..., ge=1, le=TABLE_INT32_MAX)
    Price: float | None = Field(default=None, ge=0)
    CustomerId: str | None = Field(default=None, max_length=255)


class Product(EntityRecord):
    """A catalogue product."""

    kind: ClassVar[EntityKind] = EntityKind.PRODUCTS

    Name: str = Field(..., min_length=1, max_length=255)
    Price: float = Field(..., ge=0)
    Description: str | None = Field(default=None, max_length=4000)
    ImageUrl: str | None = Field(default=None, max_length=2048)


class Customer(EntityRecord):
    """A registered customer."""

    kind: ClassVar[EntityKind] = EntityKind.CUSTOMERS

    Name: str = Field(..., min_length=1, max_length=255)
    Email: str = Field(..., min_length=3, max_length=320)
    Phone: str | None = Field(default=None, max_length=50)

    @field_validator("Email")
    @classmethod
    def _email_has_at(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Email must contain '@'")
        return value


RECORD_TYPES: dict[EntityKind, type[EntityRecord]] = {
    EntityKind.ORDERS: Order,
    EntityKind.PRODUCTS: Product,
    EntityKind.CUSTOMERS: Customer,
}


__all__ = [
    "EntityKind",
    "EntityRecord",
    "Order",
    "Product",
    "Customer",
    "RECORD_TYPES",
    "TABLE_INT32_MAX",
]
