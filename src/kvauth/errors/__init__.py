"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- KVAuthError hierarchy for typed exceptions
- Classification utilities for caller-side retry decisions
"""

from kvauth.errors.exceptions import (
    BrokerDecodeError,
    BrokerError,
    BrokerIncompleteResponseError,
    BrokerResponseError,
    BrokerTransportError,
    BrokerUnreachableError,
    ConfigurationError,
    InvalidResourceError,
    KVAuthError,
    MissingCredentialError,
    MissingIdentityContextError,
    ProviderExchangeError,
    UnknownEnvironmentError,
    UnsupportedGrantTypeError,
    classify_http_status,
    is_retryable_error,
)
from kvauth.types import ErrorCategory

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "KVAuthError",
    "ConfigurationError",
    "BrokerError",
    # Configuration errors
    "UnknownEnvironmentError",
    "MissingCredentialError",
    "MissingIdentityContextError",
    "InvalidResourceError",
    "UnsupportedGrantTypeError",
    # Broker errors
    "BrokerUnreachableError",
    "BrokerTransportError",
    "BrokerResponseError",
    "BrokerDecodeError",
    "BrokerIncompleteResponseError",
    # Provider errors
    "ProviderExchangeError",
    # Classification utilities
    "classify_http_status",
    "is_retryable_error",
]
