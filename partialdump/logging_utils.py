"""Logging setup helpers for partialdump."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from .config import DumpOptions, LoggingConfig
from .engine import PartialDumper

_NO_PAYLOAD = object()


class PayloadLogFormatter(logging.Formatter):
    """Plain text formatter that appends a partial dump of ``record.payload``."""

    def __init__(self, fmt: str | None = None, *, options: DumpOptions | None = None) -> None:
        super().__init__(fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s")
        self._dumper = PartialDumper(options)

    def format(self, record: logging.LogRecord) -> str:
        """Render one log record, with its payload if it has one."""
        text = super().format(record)
        payload = getattr(record, "payload", _NO_PAYLOAD)
        if payload is _NO_PAYLOAD:
            return text
        return f"{text} | payload={self._dumper.dump(payload)}"


class JsonLogFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def __init__(self, *, options: DumpOptions | None = None) -> None:
        super().__init__()
        self._dumper = PartialDumper(options)

    def format(self, record: logging.LogRecord) -> str:
        """Render one log record as JSON."""
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data = getattr(record, "payload", _NO_PAYLOAD)
        if data is not _NO_PAYLOAD:
            payload["payload"] = self._dumper.dump(data)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(cfg: LoggingConfig, options: DumpOptions | None = None) -> None:
    """Configure the root logger from runtime configuration.

    ``options`` controls how record payloads are dumped.
    """
    level = getattr(logging, cfg.level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    if cfg.json_logs:
        handler.setFormatter(JsonLogFormatter(options=options))
    else:
        handler.setFormatter(PayloadLogFormatter(options=options))

    root.handlers.clear()
    root.addHandler(handler)
