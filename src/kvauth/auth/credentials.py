"""
Credentials produced by identity channels.

Both classes satisfy the azure-core TokenCredential protocol
(``get_token(*scopes) -> AccessToken``), so they can be handed to Azure SDK
clients as well as to BearerAuthorizer.

- ManualTokenCredential holds a token issued by the NMI broker. It cannot
  refresh itself; the broker owns refresh for the delegated path.
- ServicePrincipalCredential wraps an azure-identity credential, which
  re-runs the client credentials exchange (with its own cache) when the token
  nears expiry.
"""

import logging
from datetime import UTC, datetime

from azure.core.credentials import AccessToken, TokenCredential

from kvauth.auth.models import BrokerToken

logger = logging.getLogger(__name__)


def resource_to_scope(resource: str) -> str:
    """Convert a resource URI to its AAD v2 '.default' scope."""
    return resource.rstrip("/") + "/.default"


class ManualTokenCredential:
    """
    Credential built directly from broker-supplied token material.

    Attributes:
        client_id: Client ID of the managed identity the broker assigned
        resource: Resource URI the token was issued for
    """

    def __init__(self, token: BrokerToken, client_id: str, resource: str):
        self._token = token
        self.client_id = client_id
        self.resource = resource

    @property
    def token_type(self) -> str:
        return self._token.token_type

    @property
    def expires_on(self) -> int:
        """Expiry as Unix timestamp (seconds)."""
        return self._token.expires_on

    def is_expired(self, buffer_seconds: int = 0) -> bool:
        return datetime.now(UTC).timestamp() >= self.expires_on - buffer_seconds

    def get_token(self, *scopes: str, **kwargs) -> AccessToken:
        """
        Return the broker token.

        Scopes are accepted for protocol compatibility; the token is only
        valid for the resource it was issued for.
        """
        if self.is_expired():
            logger.warning(
                "Delegated token has expired; acquire a new one from the broker",
                extra={"resource": self.resource, "client_id": self.client_id},
            )
        return AccessToken(self._token.access_token.get_secret_value(), self.expires_on)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(client_id={self.client_id!r}, "
            f"resource={self.resource!r}, expires_on={self.expires_on})"
        )


class ServicePrincipalCredential:
    """
    Self-refreshing credential backed by an azure-identity credential.

    Attributes:
        client_id: AAD application (client) ID
        resource: Resource URI the credential was acquired for
        expires_on: Expiry of the token exchanged at acquisition (Unix seconds)
    """

    def __init__(
        self,
        credential: TokenCredential,
        client_id: str,
        resource: str,
        expires_on: int = 0,
    ):
        self._credential = credential
        self.client_id = client_id
        self.resource = resource
        self.expires_on = expires_on

    def get_token(self, *scopes: str, **kwargs) -> AccessToken:
        """Get a token, defaulting to the acquisition resource's scope."""
        if not scopes:
            scopes = (resource_to_scope(self.resource),)
        return self._credential.get_token(*scopes, **kwargs)

    def close(self) -> None:
        close = getattr(self._credential, "close", None)
        if close is not None:
            close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(client_id={self.client_id!r}, "
            f"resource={self.resource!r})"
        )


Credential = ManualTokenCredential | ServicePrincipalCredential

__all__ = [
    "Credential",
    "ManualTokenCredential",
    "ServicePrincipalCredential",
    "resource_to_scope",
]
