"""
kvauth

Bearer token acquisition for Azure Key Vault FlexVolume workloads, through
pod identity (NMI) or an AAD service principal.
"""

from kvauth.auth import (
    AuthConfig,
    BearerAuthorizer,
    IdentityContext,
    acquire_keyvault_authorizer,
    acquire_management_authorizer,
    acquire_token,
)
from kvauth.environment import CloudEnvironment, resolve_environment
from kvauth.errors import KVAuthError
from kvauth.types import OAuthGrantType, auth_grant_type

__all__ = [
    "AuthConfig",
    "IdentityContext",
    "BearerAuthorizer",
    "CloudEnvironment",
    "KVAuthError",
    "OAuthGrantType",
    "auth_grant_type",
    "resolve_environment",
    "acquire_token",
    "acquire_management_authorizer",
    "acquire_keyvault_authorizer",
]

__version__ = "0.1.0"
