"""
Azure cloud environment resolution.

Maps a cloud name from the cloud config (``"cloud": "AzurePublicCloud"``) to
the endpoint set used for token acquisition. Lookup is case-insensitive and an
empty name means the public cloud.

AzureStackCloud has no fixed endpoints; they are read from the JSON file named
by the AZURE_ENVIRONMENT_FILEPATH environment variable, the same contract the
Azure Go SDK uses.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from kvauth.errors import UnknownEnvironmentError

logger = logging.getLogger(__name__)

ENVIRONMENT_FILEPATH_VAR = "AZURE_ENVIRONMENT_FILEPATH"
AZURE_STACK_CLOUD = "AZURESTACKCLOUD"


@dataclass(frozen=True)
class CloudEnvironment:
    """
    Endpoints identifying one Azure cloud deployment.

    Attributes:
        name: Canonical environment name (e.g., "AzurePublicCloud")
        active_directory_endpoint: Azure AD authority (token issuer)
        resource_manager_endpoint: Azure Resource Manager (management) resource
        key_vault_endpoint: Key Vault resource URI
        key_vault_dns_suffix: DNS suffix of vault hostnames
    """

    name: str
    active_directory_endpoint: str
    resource_manager_endpoint: str
    key_vault_endpoint: str
    key_vault_dns_suffix: str

    @property
    def authority_host(self) -> str:
        """Authority in the form azure-identity expects (no trailing slash)."""
        return normalize_endpoint(self.active_directory_endpoint)

    def vault_url(self, vault_name: str) -> str:
        """Return the data-plane URL of a vault in this cloud."""
        return f"https://{vault_name}.{self.key_vault_dns_suffix}"


PUBLIC_CLOUD = CloudEnvironment(
    name="AzurePublicCloud",
    active_directory_endpoint="https://login.microsoftonline.com/",
    resource_manager_endpoint="https://management.azure.com/",
    key_vault_endpoint="https://vault.azure.net/",
    key_vault_dns_suffix="vault.azure.net",
)

CHINA_CLOUD = CloudEnvironment(
    name="AzureChinaCloud",
    active_directory_endpoint="https://login.chinacloudapi.cn/",
    resource_manager_endpoint="https://management.chinacloudapi.cn/",
    key_vault_endpoint="https://vault.azure.cn/",
    key_vault_dns_suffix="vault.azure.cn",
)

US_GOVERNMENT_CLOUD = CloudEnvironment(
    name="AzureUSGovernmentCloud",
    active_directory_endpoint="https://login.microsoftonline.us/",
    resource_manager_endpoint="https://management.usgovcloudapi.net/",
    key_vault_endpoint="https://vault.usgovcloudapi.net/",
    key_vault_dns_suffix="vault.usgovcloudapi.net",
)

GERMAN_CLOUD = CloudEnvironment(
    name="AzureGermanCloud",
    active_directory_endpoint="https://login.microsoftonline.de/",
    resource_manager_endpoint="https://management.microsoftazure.de/",
    key_vault_endpoint="https://vault.microsoftazure.de/",
    key_vault_dns_suffix="vault.microsoftazure.de",
)

# Keyed by upper-cased name
ENVIRONMENTS: dict[str, CloudEnvironment] = {
    env.name.upper(): env
    for env in (PUBLIC_CLOUD, CHINA_CLOUD, US_GOVERNMENT_CLOUD, GERMAN_CLOUD)
}


def normalize_endpoint(endpoint: str) -> str:
    """Strip exactly one trailing '/' from an endpoint, if present."""
    if endpoint.endswith("/"):
        return endpoint[:-1]
    return endpoint


def load_environment_file(path: str | Path) -> CloudEnvironment:
    """
    Load a custom environment (Azure Stack) from a JSON file.

    The file uses the Go SDK field names: name, activeDirectoryEndpoint,
    resourceManagerEndpoint, keyVaultEndpoint, keyVaultDNSSuffix.

    Raises:
        UnknownEnvironmentError: If the file is missing, unreadable or incomplete
    """
    env_path = Path(path)
    try:
        data = json.loads(env_path.read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as e:
        raise UnknownEnvironmentError("AzureStackCloud", cause=e) from e

    try:
        environment = CloudEnvironment(
            name=data.get("name") or "AzureStackCloud",
            active_directory_endpoint=data["activeDirectoryEndpoint"],
            resource_manager_endpoint=data["resourceManagerEndpoint"],
            key_vault_endpoint=data["keyVaultEndpoint"],
            key_vault_dns_suffix=data["keyVaultDNSSuffix"],
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise UnknownEnvironmentError("AzureStackCloud", cause=e) from e

    logger.debug(
        "Loaded custom cloud environment",
        extra={"cloud": environment.name},
    )
    return environment


def resolve_environment(cloud_name: str) -> CloudEnvironment:
    """
    Return the environment for a cloud name.

    Args:
        cloud_name: Environment name from the cloud config; "" means public cloud

    Returns:
        CloudEnvironment for the name

    Raises:
        UnknownEnvironmentError: If the name is not a known environment
    """
    if not cloud_name:
        return PUBLIC_CLOUD

    key = cloud_name.strip().upper()

    if key == AZURE_STACK_CLOUD:
        env_file = os.environ.get(ENVIRONMENT_FILEPATH_VAR)
        if not env_file:
            raise UnknownEnvironmentError(cloud_name)
        return load_environment_file(env_file)

    environment = ENVIRONMENTS.get(key)
    if environment is None:
        raise UnknownEnvironmentError(cloud_name)
    return environment


__all__ = [
    "CloudEnvironment",
    "ENVIRONMENTS",
    "PUBLIC_CLOUD",
    "CHINA_CLOUD",
    "US_GOVERNMENT_CLOUD",
    "GERMAN_CLOUD",
    "normalize_endpoint",
    "load_environment_file",
    "resolve_environment",
]
