"""
Ingestion Errors

Exception hierarchy for the queue ingestion pipeline.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for all ingestion errors."""

    def __init__(self, message: str, kind: str | None = None):
        """
        Initialize ingestion error.

        Args:
            message: Error description
            kind: Entity kind being ingested (Orders, Products, ...)
        """
        self.kind = kind
        super().__init__(message)


class DecodeFailed(IngestionError):
    """
    Payload does not decode into a valid record.

    Reported by the decoder as a value, never raised past the pipeline.
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        validation_errors: list[str] | None = None,
    ):
        """
        Initialize decode failure.

        Args:
            message: Error description
            kind: Entity kind being decoded
            validation_errors: List of specific validation failures
        """
        self.validation_errors = validation_errors or []
        super().__init__(message, kind)


class PersistFailed(IngestionError):
    """Writing a decoded, identified record to its store failed."""

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        row_key: str | None = None,
    ):
        """
        Initialize persist failure.

        Args:
            message: Error description
            kind: Entity kind being written
            row_key: Row key assigned to the record that failed
        """
        self.row_key = row_key
        super().__init__(message, kind)
