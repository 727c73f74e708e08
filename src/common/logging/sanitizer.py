"""
Log Sanitization

Provides filters and utilities for redacting storage credentials from logs.
"""

from __future__ import annotations

import logging
import re
from re import Pattern
from typing import Any

# Patterns for credentials that must never reach log output
SENSITIVE_PATTERNS: list[tuple[str, Pattern[str]]] = [
    # Storage account key inside a connection string
    ("AccountKey", re.compile(r"AccountKey=[^;\s'\"]+", re.IGNORECASE)),
    # SAS token embedded in a connection string
    ("SharedAccessSignature", re.compile(r"SharedAccessSignature=[^;\s'\"]+", re.IGNORECASE)),
    # SAS signature query parameter in a URL
    ("sig", re.compile(r"(?<=[?&])sig=[^&\s'\"]+", re.IGNORECASE)),
    # Generic secrets in key=value form
    (
        "SECRET",
        re.compile(
            r"(secret|password|passwd|pwd)\s*[=:]\s*['\"]?[^\s'\";]{8,}['\"]?", re.IGNORECASE
        ),
    ),
    # Bearer tokens in headers
    ("Bearer", re.compile(r"Bearer\s+[a-zA-Z0-9\-_\.]+", re.IGNORECASE)),
]

# Placeholder for redacted content
REDACTION_PLACEHOLDER = "[REDACTED]"


class SanitizingFilter(logging.Filter):
    """
    A logging filter that redacts credentials from log messages.

    Covers storage account keys, SAS tokens and signatures, and generic
    secrets, so a connection string can be logged without leaking its key.

    Usage:
        logger = logging.getLogger(__name__)
        logger.addFilter(SanitizingFilter())
    """

    def __init__(
        self,
        name: str = "",
        additional_patterns: list[tuple[str, Pattern[str]]] | None = None,
        redaction_placeholder: str = REDACTION_PLACEHOLDER,
    ):
        """
        Initialize the sanitizing filter.

        Args:
            name: Filter name (passed to parent)
            additional_patterns: Extra patterns to redact beyond defaults
            redaction_placeholder: Text to replace sensitive data with
        """
        super().__init__(name)
        self._patterns = list(SENSITIVE_PATTERNS)
        if additional_patterns:
            self._patterns.extend(additional_patterns)
        self._placeholder = redaction_placeholder

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the record in place; always lets it through."""
        if record.msg:
            record.msg = self._sanitize(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._sanitize_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._sanitize_value(arg) for arg in record.args)

        return True

    def _sanitize(self, text: str) -> str:
        result = text
        for label, pattern in self._patterns:
            result = pattern.sub(f"{label}={self._placeholder}", result)
        return result

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._sanitize(value)
        return value


def configure_sanitized_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    additional_patterns: list[tuple[str, Pattern[str]]] | None = None,
) -> None:
    """
    Configure the root logger with sanitization enabled.

    Args:
        level: Logging level
        format_string: Log format string (uses default if not specified)
        additional_patterns: Extra patterns to redact
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=level, format=format_string)

    root_logger = logging.getLogger()
    sanitizing_filter = SanitizingFilter(additional_patterns=additional_patterns)
    root_logger.addFilter(sanitizing_filter)

    # Filters on a logger do not apply to records propagated from children,
    # so the handlers need it too
    for handler in root_logger.handlers:
        handler.addFilter(sanitizing_filter)
