"""
Exception hierarchy for credential acquisition.

Every failure in the acquisition chain is raised as a KVAuthError subclass so
callers can branch on type (or on ``category``) instead of parsing messages.
Messages and context never carry token material or client secrets.
"""

from kvauth.types import ErrorCategory


class KVAuthError(Exception):
    """
    Base exception for all credential acquisition errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging (never secrets)
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category in (
            ErrorCategory.TRANSIENT,
            ErrorCategory.AUTH,
            ErrorCategory.UNKNOWN,
        )

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {type(self.cause).__name__}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors (Permanent)
# =============================================================================


class ConfigurationError(KVAuthError):
    """Base class for invalid or incomplete identity configuration."""

    category = ErrorCategory.PERMANENT


class UnknownEnvironmentError(ConfigurationError):
    """Cloud name does not match any known Azure environment."""

    def __init__(self, name: str, cause: Exception | None = None):
        super().__init__(
            f"There is no cloud environment matching the name {name!r}",
            cause,
            {"cloud": name},
        )
        self.name = name


class MissingCredentialError(ConfigurationError):
    """Service principal path selected but no secret or certificate available."""

    def __init__(self, client_id: str, reason: str | None = None):
        message = f"No credentials provided for AAD application {client_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"client_id": client_id})
        self.client_id = client_id


class MissingIdentityContextError(ConfigurationError):
    """Delegated identity selected but pod name or namespace is empty."""

    pass


class InvalidResourceError(ConfigurationError):
    """Resource URI for token acquisition is empty."""

    pass


class UnsupportedGrantTypeError(ConfigurationError):
    """Requested OAuth grant type is declared but not implemented."""

    def __init__(self, grant_type):
        value = getattr(grant_type, "value", grant_type)
        super().__init__(
            f"OAuth grant type {value!r} is not supported",
            context={"grant_type": value},
        )
        self.grant_type = grant_type


# =============================================================================
# Delegated Identity (NMI broker) Errors
# =============================================================================


class BrokerError(KVAuthError):
    """Base class for failures talking to the node managed identity broker."""

    category = ErrorCategory.AUTH


class BrokerUnreachableError(BrokerError):
    """Broker could not be reached (connection refused, timeout)."""

    category = ErrorCategory.TRANSIENT


class BrokerTransportError(BrokerError):
    """Request to the broker failed below the HTTP layer."""

    category = ErrorCategory.TRANSIENT


class BrokerResponseError(BrokerError):
    """Broker answered with a non-200 status code."""

    def __init__(
        self,
        status_code: int,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        context = dict(context or {})
        context["http_status"] = status_code
        super().__init__(
            f"nmi response failed with status code: {status_code}",
            cause,
            context,
        )
        self.status_code = status_code
        self.category = classify_http_status(status_code)


class BrokerDecodeError(BrokerError):
    """Broker body is not valid JSON or does not match the token schema."""

    category = ErrorCategory.PERMANENT


class BrokerIncompleteResponseError(BrokerError):
    """Broker returned 200 without a usable token or client id."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# Identity Provider Errors
# =============================================================================


class ProviderExchangeError(KVAuthError):
    """Client credentials exchange with Azure AD failed."""

    category = ErrorCategory.AUTH


# =============================================================================
# Classification Utilities
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code in (401, 403):
        return ErrorCategory.AUTH

    if status_code in (408, 429):
        return ErrorCategory.TRANSIENT

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def is_retryable_error(exc: Exception) -> bool:
    """
    Check if a caller-side retry could help.

    kvauth never retries on its own; this only informs the caller's policy.
    Non-KVAuthError exceptions are treated as unknown and therefore retryable.
    """
    if isinstance(exc, KVAuthError):
        return exc.is_retryable
    return True
