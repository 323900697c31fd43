"""Log formatters for JSON and console output."""

import json
import logging
import sys
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import SecretStr

from kvauth.logging.context import get_log_context
from kvauth.logging.filters import redact_secrets


def json_serializer(obj: Any) -> Any:
    """
    JSON fallback for values found in log extras.

    SecretStr renders masked; datetimes as ISO 8601; enums by value.
    """
    if isinstance(obj, SecretStr):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Exception text is scrubbed of token material before serialization.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Acquisition
        "operation",
        "resource",
        "channel",
        "cloud",
        "tenant_id",
        "client_id",
        "grant_type",
        "broker_endpoint",
        "expires_on",
        "duration_ms",
        # HTTP
        "http_status",
        # Errors
        "error_category",
        "error_message",
        "error",
    ]

    NUMERIC_FIELDS = {
        "duration_ms": float,
        "http_status": int,
        "expires_on": int,
    }

    def _ensure_type(self, field: str, value: Any) -> Any:
        if field not in self.NUMERIC_FIELDS or value is None:
            return value
        try:
            return self.NUMERIC_FIELDS[field](value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _base_log_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    @staticmethod
    def _inject_context(log_entry: dict[str, Any], log_context: dict[str, str]) -> None:
        for field, value in log_context.items():
            if value:
                log_entry[field] = value

    def _inject_extra_fields(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = self._ensure_type(field, value)

    def _inject_exception(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        if not record.exc_info:
            return

        exc_type, exc_value, _ = record.exc_info
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "message": redact_secrets(str(exc_value)) if exc_value else None,
            "stacktrace": redact_secrets(self.formatException(record.exc_info)),
        }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = self._base_log_entry(record)
        self._inject_context(log_entry, get_log_context())

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        self._inject_extra_fields(log_entry, record)
        self._inject_exception(log_entry, record)

        return json.dumps(log_entry, default=json_serializer, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _format_level_name(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        color = self.COLORS.get(record.levelno, "")
        if not self._use_colors or not color:
            return level_name
        return f"{color}{level_name}{self.RESET}"

    @staticmethod
    def _build_tags(record: logging.LogRecord, log_context: dict[str, str]) -> list[str]:
        tags = []
        if log_context["cloud"]:
            tags.append(f"[{log_context['cloud']}]")
        if log_context["pod_namespace"] and log_context["pod_name"]:
            tags.append(f"[{log_context['pod_namespace']}/{log_context['pod_name']}]")
        channel = getattr(record, "channel", None) or log_context["channel"]
        if channel:
            tags.append(f"[{channel}]")
        return tags

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output with optional color coding."""
        log_context = get_log_context()
        prefix = " - ".join(
            [datetime.now().strftime("%Y-%m-%d %H:%M:%S"), self._format_level_name(record)]
        )
        tags = self._build_tags(record, log_context)

        line = f"{prefix} - {record.getMessage()}"
        if tags:
            line = f"{prefix} - {' '.join(tags)} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{redact_secrets(self.formatException(record.exc_info))}"
        return line
