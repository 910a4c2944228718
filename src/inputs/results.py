"""
src.inputs.results

Validation outcomes for querystring extraction.

Extraction never raises across its boundary: callers receive either an
ExtractionSuccess carrying a non-empty list of pairs, or an
ExtractionFailure carrying a diagnostic message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from src.schemas.canonical_input import NameValueNel, NVGetPayload


class ExtractionErrorKind(str, Enum):
    """Why a querystring could not be turned into a payload."""

    EMPTY_PAYLOAD = "empty_payload"
    DECODE_FAULT = "decode_fault"


@dataclass(frozen=True)
class ExtractionError:
    kind: ExtractionErrorKind
    message: str

    def __str__(self) -> str:
        return self.message

    @classmethod
    def empty_payload(cls, qs: str, encoding: str) -> "ExtractionError":
        return cls(
            ExtractionErrorKind.EMPTY_PAYLOAD,
            f"No name-value pairs extractable from querystring [{qs}] "
            f"with encoding [{encoding}]",
        )

    @classmethod
    def decode_fault(cls, qs: str, encoding: str, fault: str) -> "ExtractionError":
        return cls(
            ExtractionErrorKind.DECODE_FAULT,
            f"Exception extracting name-value pairs from querystring [{qs}] "
            f"with encoding [{encoding}]: [{fault}]",
        )


@dataclass(frozen=True)
class ExtractionSuccess:
    pairs: NameValueNel

    @property
    def ok(self) -> bool:
        return True

    def to_payload(self) -> NVGetPayload:
        """Wrap the extracted pairs as a tracker payload."""
        return NVGetPayload(payload=self.pairs)


@dataclass(frozen=True)
class ExtractionFailure:
    error: ExtractionError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.message


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]
