"""
Message Decoder

Turns a raw queue payload into a typed candidate record, or a DecodeFailed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import ValidationError

from src.contracts.records import EntityRecord
from src.ingestion.errors import DecodeFailed

R = TypeVar("R", bound=EntityRecord)


@dataclass(frozen=True)
class DecodeResult(Generic[R]):
    """Tagged decode outcome: exactly one of record/error is set."""

    record: R | None = None
    error: DecodeFailed | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


class MessageDecoder(Generic[R]):
    """
    Validating JSON decoder for one record type.

    Missing required fields and wrongly typed values are failures; nothing is
    silently defaulted.
    """

    def __init__(self, record_type: type[R]):
        self._record_type = record_type

    @property
    def record_type(self) -> type[R]:
        return self._record_type

    def decode(self, raw: str | bytes) -> DecodeResult[R]:
        """
        Decode and validate a payload.

        Args:
            raw: Message body (JSON text)

        Returns:
            DecodeResult with either the record or the failure
        """
        kind = self._record_type.kind.value
        try:
            record = self._record_type.model_validate_json(raw)
        except ValidationError as e:
            problems = [_describe(err) for err in e.errors()]
            return DecodeResult(
                error=DecodeFailed(
                    f"Invalid {kind} payload: {'; '.join(problems)}",
                    kind=kind,
                    validation_errors=problems,
                )
            )
        return DecodeResult(record=record)


def _describe(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ())) or "<payload>"
    return f"{location}: {err.get('msg', 'invalid')}"


__all__ = ["DecodeResult", "MessageDecoder"]
