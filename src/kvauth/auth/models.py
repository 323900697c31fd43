"""
Identity configuration and broker response models.

AuthConfig mirrors the JSON cloud config consumed by the volume driver
(camelCase keys), so a parsed azure.json can be validated directly. Secrets are
held as SecretStr and render as '**********' in repr, str and logs.
"""

import os
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

# 9999-12-31T23:59:59Z, the last instant datetime can represent
MAX_TIMESTAMP = 253402300799


class AuthConfig(BaseModel):
    """
    Identity configuration for one volume mount.

    Attributes:
        cloud: Cloud environment name ("" for AzurePublicCloud)
        tenant_id: Azure AD tenant of the subscription
        aad_client_id: Client ID of the AAD application (service principal)
        aad_client_secret: Client secret of the AAD application
        aad_client_cert_path: Path of a PEM/PKCS12 client certificate
        aad_client_cert_password: Password of the client certificate
        use_integrated_identity: Use pod identity through the NMI broker
        subscription_id: Subscription of the Key Vault
        resource_group: Resource group of the Key Vault
        provider_vault_name: Key Vault name
        provider_key_name: Key name inside the vault
        provider_key_version: Key version inside the vault
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    cloud: str = Field(default="", alias="cloud")
    tenant_id: str = Field(default="", alias="tenantId")
    aad_client_id: str = Field(default="", alias="aadClientId")
    aad_client_secret: SecretStr | None = Field(default=None, alias="aadClientSecret")
    aad_client_cert_path: str = Field(default="", alias="aadClientCertPath")
    aad_client_cert_password: SecretStr | None = Field(
        default=None, alias="aadClientCertPassword"
    )
    use_integrated_identity: bool = Field(default=False, alias="useIntegratedIdentity")
    subscription_id: str = Field(default="", alias="subscriptionId")
    resource_group: str = Field(default="", alias="resourceGroup")
    provider_vault_name: str = Field(default="", alias="providerVaultName")
    provider_key_name: str = Field(default="", alias="providerKeyName")
    provider_key_version: str = Field(default="", alias="providerKeyVersion")

    @field_validator(
        "cloud",
        "tenant_id",
        "aad_client_id",
        "aad_client_cert_path",
        "subscription_id",
        "resource_group",
        "provider_vault_name",
        "provider_key_name",
        "provider_key_version",
        mode="before",
    )
    @classmethod
    def none_as_empty(cls, v):
        # YAML renders `key:` with no value as None
        return "" if v is None else v

    @property
    def has_client_secret(self) -> bool:
        return bool(self.aad_client_secret and self.aad_client_secret.get_secret_value())

    @property
    def has_client_certificate(self) -> bool:
        return bool(self.aad_client_cert_path)

    @property
    def credential_mode(self) -> str:
        """
        Credential path this configuration selects, for diagnostics.

        Returns:
            "delegated", "client_secret", "client_certificate" or "none"
        """
        if self.use_integrated_identity:
            return "delegated"
        if self.has_client_secret:
            return "client_secret"
        if self.has_client_certificate:
            return "client_certificate"
        return "none"


@dataclass(frozen=True)
class IdentityContext:
    """Pod identity forwarded to the NMI broker."""

    pod_name: str
    pod_namespace: str

    @classmethod
    def from_env(cls) -> "IdentityContext":
        """Build from POD_NAME / POD_NAMESPACE (downward API)."""
        return cls(
            pod_name=os.getenv("POD_NAME", ""),
            pod_namespace=os.getenv("POD_NAMESPACE", ""),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.pod_name and self.pod_namespace)


class BrokerToken(BaseModel):
    """
    Token material returned by the NMI broker (ADAL token JSON).

    Numeric fields arrive as JSON strings ("3599"); empty strings count as 0.
    When only expires_in is sent, expires_on is fixed from it at parse time.
    """

    model_config = ConfigDict(extra="ignore")

    access_token: SecretStr = SecretStr("")
    refresh_token: SecretStr | None = None
    expires_in: int = Field(default=0, ge=0, le=MAX_TIMESTAMP)
    expires_on: int = Field(default=0, ge=0, le=MAX_TIMESTAMP)
    not_before: int = Field(default=0, ge=0, le=MAX_TIMESTAMP)
    resource: str = ""
    token_type: str = "Bearer"

    @field_validator("expires_in", "expires_on", "not_before", mode="before")
    @classmethod
    def empty_number_as_zero(cls, v):
        if v is None or v == "":
            return 0
        return v

    @model_validator(mode="after")
    def absolute_expiry(self) -> "BrokerToken":
        if not self.expires_on and self.expires_in:
            expires_on = int(datetime.now(UTC).timestamp()) + self.expires_in
            if expires_on > MAX_TIMESTAMP:
                raise ValueError("expires_in is out of range")
            self.expires_on = expires_on
        return self

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token.get_secret_value())

    def expires_at(self) -> datetime:
        """Expiry as a UTC datetime (the epoch when the broker sent no expiry)."""
        return datetime.fromtimestamp(self.expires_on, UTC)


class DelegatedTokenResponse(BaseModel):
    """Body of a successful NMI /host/token/ response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: BrokerToken | None = None
    client_id: str = Field(default="", alias="clientid")

    @property
    def is_complete(self) -> bool:
        return bool(self.client_id and self.token and self.token.has_access_token)


__all__ = ["AuthConfig", "IdentityContext", "BrokerToken", "DelegatedTokenResponse"]
