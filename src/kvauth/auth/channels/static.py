"""
Service principal channels: client secret and client certificate.

Each acquisition builds a fresh azure-identity credential against the resolved
authority and tenant, then performs one token request so that a rejected
secret or unknown tenant surfaces immediately as ProviderExchangeError rather
than on the first outbound call. Later refreshes are handled by azure-identity.
"""

import logging
from abc import abstractmethod
from pathlib import Path

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.identity import CertificateCredential, ClientSecretCredential

from kvauth.auth.channels.base import IdentityChannel
from kvauth.auth.credentials import ServicePrincipalCredential, resource_to_scope
from kvauth.environment import CloudEnvironment
from kvauth.errors import InvalidResourceError, MissingCredentialError, ProviderExchangeError

logger = logging.getLogger(__name__)


class _ServicePrincipalChannel(IdentityChannel):
    """Shared exchange logic for secret and certificate channels."""

    def __init__(self, tenant_id: str, client_id: str, environment: CloudEnvironment):
        super().__init__(environment)
        self.tenant_id = tenant_id
        self.client_id = client_id

    @abstractmethod
    def _check_credential(self) -> None:
        """Raise MissingCredentialError when the credential is not usable."""

    @abstractmethod
    def _build_credential(self) -> TokenCredential:
        """Build the azure-identity credential for this channel."""

    def acquire_token(self, resource: str) -> ServicePrincipalCredential:
        """
        Run the client credentials exchange for a resource.

        Raises:
            InvalidResourceError: Empty resource
            MissingCredentialError: No secret / certificate configured
            ProviderExchangeError: Azure AD rejected the exchange
        """
        if not resource:
            raise InvalidResourceError("resource must not be empty")
        self._check_credential()

        context = {
            "resource": resource,
            "tenant_id": self.tenant_id,
            "client_id": self.client_id,
            "channel": self.name,
        }
        scope = resource_to_scope(resource)

        credential = None
        try:
            credential = self._build_credential()
            access_token = credential.get_token(scope)
        except (AzureError, ValueError) as e:
            if credential is not None:
                credential.close()
            raise ProviderExchangeError(
                f"client credentials exchange failed for AAD application {self.client_id}",
                cause=e,
                context=context,
            ) from e

        logger.debug(
            "Acquired service principal token",
            extra={
                "resource": resource,
                "client_id": self.client_id,
                "channel": self.name,
                "expires_on": access_token.expires_on,
            },
        )
        return ServicePrincipalCredential(
            credential, self.client_id, resource, expires_on=access_token.expires_on
        )


class StaticCredentialChannel(_ServicePrincipalChannel):
    """Exchange a client ID and secret with Azure AD."""

    name = "client_secret"

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        environment: CloudEnvironment,
    ):
        super().__init__(tenant_id, client_id, environment)
        self._client_secret = client_secret

    def _check_credential(self) -> None:
        if not self._client_secret:
            raise MissingCredentialError(self.client_id)

    def _build_credential(self) -> ClientSecretCredential:
        logger.info(
            "azure: using client_id+client_secret to retrieve access token",
            extra={"tenant_id": self.tenant_id, "client_id": self.client_id},
        )
        return ClientSecretCredential(
            tenant_id=self.tenant_id,
            client_id=self.client_id,
            client_secret=self._client_secret,
            authority=self.environment.authority_host,
        )


class CertificateCredentialChannel(_ServicePrincipalChannel):
    """Exchange a client ID and certificate (PEM or PKCS12) with Azure AD."""

    name = "client_certificate"

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        certificate_path: str,
        environment: CloudEnvironment,
        certificate_password: str | None = None,
    ):
        super().__init__(tenant_id, client_id, environment)
        self.certificate_path = certificate_path
        self._certificate_password = certificate_password

    def _check_credential(self) -> None:
        if not self.certificate_path:
            raise MissingCredentialError(self.client_id)
        if not Path(self.certificate_path).is_file():
            raise MissingCredentialError(
                self.client_id,
                reason=f"certificate file not found: {self.certificate_path}",
            )

    def _build_credential(self) -> CertificateCredential:
        logger.info(
            "azure: using client_id+client_certificate to retrieve access token",
            extra={"tenant_id": self.tenant_id, "client_id": self.client_id},
        )
        return CertificateCredential(
            tenant_id=self.tenant_id,
            client_id=self.client_id,
            certificate_path=self.certificate_path,
            password=self._certificate_password or None,
            authority=self.environment.authority_host,
        )


__all__ = ["StaticCredentialChannel", "CertificateCredentialChannel"]
