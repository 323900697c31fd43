"""Logging setup and configuration."""

import logging
import sys
from typing import TextIO

from kvauth.logging.filters import SecretRedactionFilter
from kvauth.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_LEVEL = logging.INFO

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "msal",
    "urllib3",
]


def setup_logging(
    level: int | str = DEFAULT_LEVEL,
    json_format: bool = False,
    stream: TextIO | None = None,
    suppress_noisy: bool = True,
) -> logging.Logger:
    """
    Configure the root logger with a single redacting stream handler.

    The volume driver runs as a short-lived process whose stdout/stderr is
    captured by the kubelet, so there are no file handlers.

    Args:
        level: Handler level (int or level name)
        json_format: Emit one JSON object per line instead of console text
        stream: Output stream (default: sys.stderr)
        suppress_noisy: Quiet down Azure SDK and HTTP client loggers

    Returns:
        Root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())
    handler.addFilter(SecretRedactionFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if suppress_noisy:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
