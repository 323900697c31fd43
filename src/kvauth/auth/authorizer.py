"""Bearer authorizer handed to management and Key Vault clients."""

from requests import PreparedRequest
from requests.auth import AuthBase

from kvauth.auth.credentials import Credential, resource_to_scope

AUTHORIZATION_HEADER = "Authorization"


class BearerAuthorizer(AuthBase):
    """
    Attach ``Authorization: Bearer <token>`` to outgoing requests.

    The token is fetched from the credential on every request, so a
    self-refreshing credential stays current for the lifetime of the
    authorizer. The authorizer itself is immutable after construction.

    Usage:
        authorizer = acquire_keyvault_authorizer(config, identity)
        requests.get(secret_url, auth=authorizer)
    """

    def __init__(self, credential: Credential, scope: str):
        self._credential = credential
        self._scope = scope

    @property
    def credential(self) -> Credential:
        """Underlying credential (azure-core TokenCredential compatible)."""
        return self._credential

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def client_id(self) -> str:
        return self._credential.client_id

    def authorization_header(self) -> dict[str, str]:
        """Return the header dict for clients that do not take a requests auth."""
        token = self._credential.get_token(self._scope)
        return {AUTHORIZATION_HEADER: f"Bearer {token.token}"}

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        request.headers.update(self.authorization_header())
        return request

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client_id={self.client_id!r}, scope={self._scope!r})"


def wrap(credential: Credential, scope: str | None = None) -> BearerAuthorizer:
    """
    Wrap a credential into a BearerAuthorizer.

    Pure construction: no network call and no failure path.

    Args:
        credential: Credential produced by an identity channel
        scope: Token scope (default: the credential's resource + "/.default")
    """
    return BearerAuthorizer(credential, scope or resource_to_scope(credential.resource))


__all__ = ["BearerAuthorizer", "wrap", "AUTHORIZATION_HEADER"]
