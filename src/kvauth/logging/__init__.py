"""
Structured logging module.

Provides JSON and console logging with pod/cloud context propagation and
redaction of token material.
"""

from kvauth.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from kvauth.logging.context_managers import LogContext, OperationContext, log_operation
from kvauth.logging.filters import SecretRedactionFilter, redact_secrets
from kvauth.logging.formatters import ConsoleFormatter, JSONFormatter
from kvauth.logging.setup import setup_logging
from kvauth.logging.utilities import log_exception, log_with_context

__all__ = [
    # Setup
    "setup_logging",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Filters
    "SecretRedactionFilter",
    "redact_secrets",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Context Managers
    "LogContext",
    "OperationContext",
    "log_operation",
    # Utilities
    "log_with_context",
    "log_exception",
]
