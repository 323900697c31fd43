"""
Credential acquisition.

Components:
    - AuthConfig / IdentityContext: inputs supplied by the volume driver
    - Identity channels: NMI broker (delegated), client secret, client certificate
    - Credentials: ManualTokenCredential, ServicePrincipalCredential
    - BearerAuthorizer: requests auth that attaches the bearer header
    - Orchestrator: management and Key Vault entry points

Example:
    >>> config = AuthConfig(tenantId="...", aadClientId="...", aadClientSecret="...")
    >>> authorizer = acquire_keyvault_authorizer(config)
    >>> requests.get(secret_url, auth=authorizer)
"""

from kvauth.auth.authorizer import BearerAuthorizer, wrap
from kvauth.auth.channels import (
    CertificateCredentialChannel,
    DelegatedIdentityChannel,
    IdentityChannel,
    StaticCredentialChannel,
)
from kvauth.auth.credentials import (
    Credential,
    ManualTokenCredential,
    ServicePrincipalCredential,
    resource_to_scope,
)
from kvauth.auth.models import AuthConfig, BrokerToken, DelegatedTokenResponse, IdentityContext
from kvauth.auth.orchestrator import (
    acquire_keyvault_authorizer,
    acquire_management_authorizer,
    acquire_token,
    select_channel,
)

__all__ = [
    # Models
    "AuthConfig",
    "IdentityContext",
    "BrokerToken",
    "DelegatedTokenResponse",
    # Channels
    "IdentityChannel",
    "DelegatedIdentityChannel",
    "StaticCredentialChannel",
    "CertificateCredentialChannel",
    # Credentials
    "Credential",
    "ManualTokenCredential",
    "ServicePrincipalCredential",
    "resource_to_scope",
    # Authorizer
    "BearerAuthorizer",
    "wrap",
    # Orchestration
    "select_channel",
    "acquire_token",
    "acquire_management_authorizer",
    "acquire_keyvault_authorizer",
]
