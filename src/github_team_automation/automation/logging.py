"""Structured logging configuration.

Uses standard library logging with either a JSON formatter or a formatter that
speaks GitHub Actions workflow commands.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every record carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class _StructuredFormatter(logging.Formatter):
    @staticmethod
    def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }


class JsonFormatter(_StructuredFormatter):
    """One JSON object per record; ``extra`` fields are nested under ``"extra"``."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        created = datetime.fromtimestamp(record.created, tz=UTC)
        payload: dict[str, Any] = dict(
            timestamp=created.isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        extra = self.extra_fields(record)
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ActionsFormatter(_StructuredFormatter):
    """Format records as GitHub Actions workflow commands.

    DEBUG becomes ``::debug::`` (only shown when the run has debug logging on),
    WARNING ``::warning::`` and ERROR and above ``::error::``. INFO is printed plain.
    """

    _COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        message = record.getMessage()
        extra = self.extra_fields(record)
        if extra:
            message = f"{message} {json.dumps(extra, ensure_ascii=False, default=str)}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        command = self._COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands are single-line; newlines must be escaped.
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def configure_logging(level: str, fmt: str = "json") -> None:
    """Configure root logging with structured output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(ActionsFormatter() if fmt == "actions" else JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # Keep third-party loggers reasonably quiet unless explicitly configured.
    logging.getLogger("github").setLevel(max(root.level, logging.INFO))
    logging.getLogger("urllib3").setLevel(max(root.level, logging.INFO))
