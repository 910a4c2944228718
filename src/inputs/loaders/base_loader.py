"""
Base Collector Loader.

Abstract base class for collector adapters: each collector (CloudFront,
Clojure, ...) writes its own log format, and its loader turns one raw line
into a CanonicalInput. Format-specific parsing lives in subclasses.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
import logging

from pydantic import ValidationError

from src.configs.config import Config
from src.inputs.querystring import extract
from src.inputs.results import ExtractionSuccess
from src.monitoring.logging import setup_logger, with_context
from src.schemas.canonical_input import (
    CanonicalInput,
    InputSource,
    NVGetPayload,
    TrackerPayload,
)

LOGGER_NAME = "src.inputs.loaders"


@dataclass
class LoadSummary:
    """
    Result of loading a batch of raw lines.

    Dropped lines are counted, not raised: what to do with them is up to
    the caller.
    """

    records: List[CanonicalInput] = field(default_factory=list)
    total_lines: int = 0
    dropped: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def kept(self) -> int:
        return len(self.records)


class CollectorLoader(ABC):
    """
    Abstract base class for collector loaders.

    Subclasses must implement:
        - to_canonical_input(): Convert one raw line, or return None to skip it
    """

    def __init__(self, source: InputSource, encoding: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            source: Collector that produced the lines
            encoding: Querystring encoding; defaults to the configured one
        """
        self.source = source
        self.encoding = encoding or Config.get_default_encoding()
        self.logger = with_context(
            logging.getLogger(f"{LOGGER_NAME}.{source.collector}"),
            collector=source.collector,
            hostname=source.hostname,
        )

    @staticmethod
    def setup_logging() -> logging.Logger:
        """
        Configure the shared loader logger from the logging config.

        Call once at startup, before loading; every loader logs below it.
        """
        return setup_logger(LOGGER_NAME, Config.get_logging_options())

    @abstractmethod
    def to_canonical_input(self, line: str) -> Optional[CanonicalInput]:
        """
        Convert a raw collector line into a CanonicalInput.

        Returns:
            CanonicalInput, or None if the line should be dropped
        """
        pass

    def build_payload(
        self, qs: str, encoding: Optional[str] = None
    ) -> Optional[NVGetPayload]:
        """
        Extract an NVGetPayload from a querystring.

        Failed extractions are logged and reported as None.
        """
        encoding = encoding or self.encoding
        result = extract(qs, encoding)
        if isinstance(result, ExtractionSuccess):
            return result.to_payload()

        self.logger.warning(
            "Dropping payload: %s",
            result.message,
            extra={"stage": "extract", "event": result.error.kind.value},
        )
        return None

    def build_canonical_input(
        self,
        timestamp: datetime,
        payload: TrackerPayload,
        *,
        encoding: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        referer_uri: Optional[str] = None,
        headers: Sequence[str] = (),
        user_id: Optional[str] = None,
    ) -> CanonicalInput:
        """Assemble a CanonicalInput for this loader's source."""
        return CanonicalInput(
            timestamp=timestamp,
            payload=payload,
            source=self.source,
            encoding=encoding or self.encoding,
            ip_address=ip_address,
            user_agent=user_agent,
            referer_uri=referer_uri,
            headers=tuple(headers),
            user_id=user_id,
        )

    def load(self, lines: Iterable[str]) -> LoadSummary:
        """
        Convert a batch of raw lines.

        Args:
            lines: Raw collector lines

        Returns:
            LoadSummary with the kept records and drop counts
        """
        summary = LoadSummary()

        for line in lines:
            summary.total_lines += 1
            try:
                record = self.to_canonical_input(line)
            except ValidationError as e:
                summary.errors.append(str(e))
                self.logger.warning(
                    "Invalid canonical input on line %d: %s",
                    summary.total_lines,
                    e,
                    extra={"stage": "build", "event": "invalid_record"},
                )
                record = None

            if record is None:
                summary.dropped += 1
            else:
                summary.records.append(record)

        self.logger.info(
            "Loaded %d/%d lines (%d dropped)",
            summary.kept,
            summary.total_lines,
            summary.dropped,
        )
        return summary
