"""
Unit tests for the base_loader module.

Tests for CollectorLoader and LoadSummary.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import pytest

from src.configs.config import Config
from src.inputs.loaders.base_loader import LOGGER_NAME, CollectorLoader, LoadSummary
from src.monitoring.logging import JsonFormatter, LoggingOptions, TextFormatter
from src.schemas.canonical_input import (
    CanonicalInput,
    JsonGetPayload,
    NVGetPayload,
)


# =============================================================================
# FIXTURES
# =============================================================================


class TsvLoader(CollectorLoader):
    """Loader for lines of: timestamp<TAB>querystring<TAB>ip."""

    def to_canonical_input(self, line: str) -> Optional[CanonicalInput]:
        timestamp, qs, ip = line.split("\t")
        payload = self.build_payload(qs)
        if payload is None:
            return None
        return self.build_canonical_input(
            datetime.fromisoformat(timestamp),
            payload,
            ip_address=ip or None,
        )


@pytest.fixture
def loader(input_source):
    return TsvLoader(input_source, encoding="UTF-8")


# =============================================================================
# TEST CLASSES
# =============================================================================


class TestLoadSummary:
    """Tests for LoadSummary dataclass."""

    def test_default_values(self):
        summary = LoadSummary()
        assert summary.records == []
        assert summary.total_lines == 0
        assert summary.dropped == 0
        assert summary.errors == []
        assert summary.kept == 0


class TestCollectorLoader:
    """Tests for CollectorLoader behaviour."""

    def test_cannot_instantiate_abstract(self, input_source):
        with pytest.raises(TypeError):
            CollectorLoader(input_source)  # type: ignore[abstract]

    def test_default_encoding_from_config(self, input_source):
        assert TsvLoader(input_source).encoding == "UTF-8"

    def test_explicit_encoding(self, input_source):
        assert TsvLoader(input_source, encoding="ISO-8859-1").encoding == "ISO-8859-1"

    def test_build_payload_success(self, loader):
        payload = loader.build_payload("e=pv&page=home")
        assert isinstance(payload, NVGetPayload)
        assert payload.payload.to_list() == [("e", "pv"), ("page", "home")]

    def test_build_payload_failure_logged(self, loader, caplog):
        """Failed extraction should be logged and return None."""
        with caplog.at_level(logging.WARNING):
            payload = loader.build_payload("", encoding="UTF-8")

        assert payload is None
        record = caplog.records[-1]
        assert "No name-value pairs extractable" in record.getMessage()
        assert record.event == "empty_payload"
        assert record.collector == "cloudfront"
        assert record.stage == "extract"

    def test_build_payload_decode_fault(self, loader, caplog):
        with caplog.at_level(logging.WARNING):
            payload = loader.build_payload("e=pv", encoding="not-a-real-encoding")

        assert payload is None
        assert caplog.records[-1].event == "decode_fault"

    def test_build_canonical_input(self, loader, input_source, nv_payload):
        record = loader.build_canonical_input(
            datetime(2013, 8, 17, tzinfo=timezone.utc),
            nv_payload,
            headers=["Accept: */*"],
            user_id="u-1",
        )
        assert record.source == input_source
        assert record.encoding == "UTF-8"
        assert record.headers == ("Accept: */*",)
        assert record.user_id == "u-1"

    def test_build_canonical_input_json_payload(self, loader):
        record = loader.build_canonical_input(
            datetime(2013, 8, 17, tzinfo=timezone.utc),
            JsonGetPayload(payload="{}"),
            encoding="ISO-8859-1",
        )
        assert record.payload.kind == "json_get"
        assert record.encoding == "ISO-8859-1"


class TestLoad:
    """Tests for batch loading."""

    def test_load_keeps_and_drops(self, loader):
        lines = [
            "2013-08-17T12:00:00+00:00\te=pv&page=home\t203.0.113.5",
            "2013-08-17T12:00:01+00:00\t\t203.0.113.6",
            "2013-08-17T12:00:02+00:00\tpage=Dreaming%20Way%20Tarot\t",
        ]

        summary = loader.load(lines)

        assert summary.total_lines == 3
        assert summary.kept == 2
        assert summary.dropped == 1
        assert summary.records[0].ip_address == "203.0.113.5"
        assert summary.records[1].ip_address is None
        assert summary.records[1].payload.payload.get("page") == "Dreaming%20Way%20Tarot"

    def test_invalid_record_dropped(self, loader):
        """A naive timestamp fails validation and the line is dropped."""
        summary = loader.load(["2013-08-17T12:00:00\te=pv\t"])

        assert summary.kept == 0
        assert summary.dropped == 1
        assert len(summary.errors) == 1

    def test_summary_logged(self, loader, caplog):
        with caplog.at_level(logging.INFO):
            loader.load(["2013-08-17T12:00:00+00:00\te=pv\t"])

        assert "Loaded 1/1 lines (0 dropped)" in caplog.text


class TestSetupLogging:
    """Tests for configuring the loader logger from config."""

    @pytest.fixture
    def loader_logger(self):
        logger = logging.getLogger(LOGGER_NAME)
        yield logger
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    def test_uses_config_options(self, loader_logger, monkeypatch):
        monkeypatch.setattr(
            Config,
            "get_logging_options",
            classmethod(lambda cls: LoggingOptions(level="DEBUG", json_logs=True)),
        )

        logger = CollectorLoader.setup_logging()

        assert logger is loader_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_default_config(self, loader_logger):
        logger = CollectorLoader.setup_logging()

        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0].formatter, TextFormatter)
