"""Structured logging with context injection.

Features:
- console handler
- optional file handler
- JSON logs optional (easy ingestion)
- context injection (collector/hostname/stage) without needing a big framework
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONTEXT_FIELDS = ("collector", "hostname", "stage", "event")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if getattr(record, k, None) is not None:
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        # allow structured payload
        payload = getattr(record, "payload", None)
        if isinstance(payload, dict):
            base["payload"] = payload

        return json.dumps(base, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name]

        ctx = []
        for k in CONTEXT_FIELDS:
            value = getattr(record, k, None)
            if value:
                ctx.append(f"{k}={value}")

        if ctx:
            parts.append("[" + " ".join(ctx) + "]")

        parts.append(record.getMessage())
        s = " ".join(parts)

        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)

        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingOptions:
    """Configure logging behavior."""

    level: str = "INFO"
    json_logs: bool = False
    enable_console: bool = True
    log_file: Path | None = None


def setup_logger(
    name: str = "src.inputs",
    options: LoggingOptions | None = None,
) -> logging.Logger:
    """Configure and return the base logger for input loading."""
    options = options or LoggingOptions()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options.level.upper(), logging.INFO))
    logger.propagate = False

    # Clear old handlers if re-configuring
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = JsonFormatter() if options.json_logs else TextFormatter()

    if options.enable_console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(logger.level)
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    if options.log_file is not None:
        path = Path(options.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(logger.level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


# ---------------------------------------------------------------------
# Context injection
# ---------------------------------------------------------------------


class ContextAdapter(logging.LoggerAdapter):
    """Inject context fields into log records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        merged = dict(self.extra)
        merged.update(extra)
        kwargs["extra"] = merged
        return msg, kwargs


def with_context(
    logger: logging.Logger,
    *,
    collector: str | None = None,
    hostname: str | None = None,
    stage: str | None = None,
) -> ContextAdapter:
    """Create a context adapter with collector, hostname, and stage info."""
    extra: dict[str, Any] = {}
    if collector:
        extra["collector"] = collector
    if hostname:
        extra["hostname"] = hostname
    if stage:
        extra["stage"] = stage
    return ContextAdapter(logger, extra)
