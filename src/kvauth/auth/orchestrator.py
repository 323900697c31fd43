"""
Token acquisition orchestration.

Resolves the cloud environment, picks the resource for the use case
(Azure Resource Manager or Key Vault), selects exactly one identity channel
from the configuration and wraps the resulting credential in an authorizer.

Everything is built per call: no module-level OAuth config, no cached
credentials. Failures propagate unchanged as KVAuthError subclasses.
"""

import logging
from collections.abc import Callable

import requests

from kvauth.auth.authorizer import BearerAuthorizer, wrap
from kvauth.auth.channels import (
    DEFAULT_BROKER_TIMEOUT,
    NMI_ENDPOINT,
    CertificateCredentialChannel,
    DelegatedIdentityChannel,
    IdentityChannel,
    StaticCredentialChannel,
)
from kvauth.auth.credentials import Credential
from kvauth.auth.models import AuthConfig, IdentityContext
from kvauth.environment import CloudEnvironment, normalize_endpoint, resolve_environment
from kvauth.errors import MissingCredentialError, UnsupportedGrantTypeError
from kvauth.logging import LogContext, log_operation
from kvauth.types import OAuthGrantType

logger = logging.getLogger(__name__)

EndpointSelector = Callable[[CloudEnvironment], str]


def management_resource(environment: CloudEnvironment) -> str:
    """Azure Resource Manager resource URI."""
    return environment.resource_manager_endpoint


def keyvault_resource(environment: CloudEnvironment) -> str:
    """Key Vault resource URI without its trailing '/'."""
    return normalize_endpoint(environment.key_vault_endpoint)


def select_channel(
    config: AuthConfig,
    environment: CloudEnvironment,
    identity: IdentityContext | None = None,
    broker_endpoint: str = NMI_ENDPOINT,
    broker_timeout: float | tuple[float, float] = DEFAULT_BROKER_TIMEOUT,
    session: requests.Session | None = None,
) -> IdentityChannel:
    """
    Pick the identity channel a configuration asks for.

    Dispatches on config.credential_mode, which encodes the priority:
    delegated identity, client secret, client certificate.

    Raises:
        MissingCredentialError: No credential path is configured
    """
    mode = config.credential_mode

    if mode == DelegatedIdentityChannel.name:
        return DelegatedIdentityChannel(
            identity or IdentityContext(pod_name="", pod_namespace=""),
            environment,
            broker_endpoint=broker_endpoint,
            timeout=broker_timeout,
            session=session,
        )

    if mode == StaticCredentialChannel.name:
        return StaticCredentialChannel(
            config.tenant_id,
            config.aad_client_id,
            config.aad_client_secret.get_secret_value(),
            environment,
        )

    if mode == CertificateCredentialChannel.name:
        password = config.aad_client_cert_password
        return CertificateCredentialChannel(
            config.tenant_id,
            config.aad_client_id,
            config.aad_client_cert_path,
            environment,
            certificate_password=password.get_secret_value() if password else None,
        )

    raise MissingCredentialError(config.aad_client_id)


def acquire_token(
    config: AuthConfig,
    identity: IdentityContext | None,
    resource: str,
    environment: CloudEnvironment | None = None,
    **channel_options,
) -> Credential:
    """
    Acquire a credential for an arbitrary resource URI.

    Args:
        config: Identity configuration
        identity: Pod identity (required for delegated identity)
        resource: Resource URI to request a token for
        environment: Pre-resolved environment (default: resolved from config.cloud)
        **channel_options: broker_endpoint, broker_timeout, session

    Raises:
        KVAuthError: Any typed acquisition failure
    """
    environment = environment or resolve_environment(config.cloud)
    channel = select_channel(config, environment, identity, **channel_options)

    with log_operation(
        logger,
        "acquire_token",
        level=logging.INFO,
        resource=resource,
        channel=channel.name,
    ) as op:
        credential = channel.acquire_token(resource)
        op.add_context(client_id=credential.client_id, expires_on=credential.expires_on)
    return credential


def _acquire_authorizer(
    config: AuthConfig,
    identity: IdentityContext | None,
    endpoint_selector: EndpointSelector,
    grant_type: OAuthGrantType,
    **channel_options,
) -> BearerAuthorizer:
    if grant_type is not OAuthGrantType.SERVICE_PRINCIPAL:
        raise UnsupportedGrantTypeError(grant_type)

    environment = resolve_environment(config.cloud)
    resource = endpoint_selector(environment)

    with LogContext(
        cloud=environment.name,
        pod_name=identity.pod_name if identity else None,
        pod_namespace=identity.pod_namespace if identity else None,
    ):
        credential = acquire_token(
            config, identity, resource, environment=environment, **channel_options
        )
    return wrap(credential)


def acquire_management_authorizer(
    config: AuthConfig,
    identity: IdentityContext | None = None,
    grant_type: OAuthGrantType = OAuthGrantType.SERVICE_PRINCIPAL,
    **channel_options,
) -> BearerAuthorizer:
    """
    Acquire an authorizer for the Azure Resource Manager API.

    Args:
        config: Identity configuration
        identity: Pod identity (required for delegated identity)
        grant_type: OAuth grant (only SERVICE_PRINCIPAL is supported)
        **channel_options: broker_endpoint, broker_timeout, session

    Returns:
        BearerAuthorizer scoped to the management endpoint

    Raises:
        KVAuthError: Any typed acquisition failure
    """
    return _acquire_authorizer(
        config, identity, management_resource, grant_type, **channel_options
    )


def acquire_keyvault_authorizer(
    config: AuthConfig,
    identity: IdentityContext | None = None,
    grant_type: OAuthGrantType = OAuthGrantType.SERVICE_PRINCIPAL,
    **channel_options,
) -> BearerAuthorizer:
    """
    Acquire an authorizer for the Key Vault data plane.

    Same contract as acquire_management_authorizer, scoped to the Key Vault
    resource of the configured cloud.
    """
    return _acquire_authorizer(
        config, identity, keyvault_resource, grant_type, **channel_options
    )


__all__ = [
    "select_channel",
    "acquire_token",
    "acquire_management_authorizer",
    "acquire_keyvault_authorizer",
    "management_resource",
    "keyvault_resource",
]
