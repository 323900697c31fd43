"""
Core types shared across the kvauth package.

ErrorCategory classifies failures so callers can decide whether layering a
retry on top of an acquisition makes sense. Nothing inside kvauth retries.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed if the caller retries
                   (e.g., broker connection refused, timeouts, 5xx)
        AUTH: Identity failures where fresh credentials or a fresh broker
              assignment may help (e.g., 401, rejected client secret)
        PERMANENT: Failures that won't succeed on retry
                   (e.g., unknown cloud, missing credential, malformed response)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class OAuthGrantType(Enum):
    """OAuth grant used when exchanging service principal credentials."""

    SERVICE_PRINCIPAL = "service_principal"
    DEVICE_FLOW = "device_flow"


def auth_grant_type() -> OAuthGrantType:
    """Return the grant type used by the volume driver (client credentials)."""
    return OAuthGrantType.SERVICE_PRINCIPAL


__all__ = ["ErrorCategory", "OAuthGrantType", "auth_grant_type"]
