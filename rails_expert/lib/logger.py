"""
Logging setup for the Rails Expert tooling.
"""

import logging
import sys
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from rails_expert.config import get_settings


class LogBuffer:
    """Circular buffer for storing recent log entries."""

    def __init__(self, maxlen: int = 500):
        self._buffer: deque[dict[str, Any]] = deque(maxlen=maxlen)

    def append(self, entry: dict[str, Any]) -> None:
        """Add a log entry to the buffer."""
        self._buffer.append(entry)

    def get_recent(self, limit: int = 100, check: Optional[str] = None) -> list[dict[str, Any]]:
        """Get the most recent log entries, optionally for one check."""
        entries = list(self._buffer)
        if check is not None:
            entries = [e for e in entries if e.get("check") == check]
        return entries[-limit:] if limit < len(entries) else entries

    def clear(self) -> None:
        self._buffer.clear()


# Record attributes passed via `extra=` that are copied into buffer entries
CONTEXT_FIELDS = ("check", "findings", "path")


class BufferedHandler(logging.Handler):
    """Logging handler that stores entries in a buffer.

    Context passed with `extra=` (see CONTEXT_FIELDS) is kept, so /api/logs
    can filter entries by check.
    """

    def __init__(self, buffer: LogBuffer, level: int = logging.NOTSET):
        super().__init__(level)
        self.buffer = buffer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": self.format(record),
            }
            for field in CONTEXT_FIELDS:
                value = getattr(record, field, None)
                if value is not None:
                    entry[field] = value
            self.buffer.append(entry)
        except Exception:
            self.handleError(record)


# Global log buffer
_log_buffer = LogBuffer()

# Handlers installed by setup_logging, replaced on each call
_handlers: list[logging.Handler] = []


def get_log_buffer() -> LogBuffer:
    """Get the global log buffer."""
    return _log_buffer


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
) -> None:
    """Set up logging configuration.

    Console output goes to stderr so that `--json` output on stdout stays
    machine-readable.
    """
    settings = get_settings()

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    log_format = format_string or settings.log_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in _handlers:
        root_logger.removeHandler(handler)
    _handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    buffer_handler = BufferedHandler(_log_buffer, log_level)
    buffer_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(buffer_handler)
    _handlers.append(buffer_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
