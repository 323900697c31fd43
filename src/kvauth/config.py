"""Identity configuration loading.

Reads the cloud config file the volume driver is deployed with (azure.json).
The file is JSON; hand-written YAML configs are accepted too. JSON content is
parsed with the json module since YAML rejects tab indentation.

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in string values.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from kvauth.auth.models import AuthConfig
from kvauth.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_PATH_VAR = "KVAUTH_CLOUD_CONFIG"
DEFAULT_CONFIG_FILE = Path("/etc/kubernetes/azure.json")

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(([^}]*))?)?\}")


def load_config_file(path: Path) -> Any:
    """Load a JSON cloud config, or a YAML one when the content is not JSON."""
    text = Path(path).read_text(encoding="utf-8-sig")
    if Path(path).suffix.lower() == ".json" or text.lstrip().startswith("{"):
        return json.loads(text)
    return yaml.safe_load(text) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return _ENV_VAR_PATTERN.sub(replacer, data)
    else:
        return data


def _validate(data: Dict[str, Any], source: str) -> AuthConfig:
    try:
        return AuthConfig.model_validate(data)
    except ValidationError as e:
        # Report field names only; input values may be secrets
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigurationError(
            f"Invalid identity configuration in {source}: {', '.join(fields)}",
            cause=e,
            context={"fields": fields},
        ) from e


def load_auth_config(path: str | Path | None = None) -> AuthConfig:
    """
    Load AuthConfig from a cloud config file.

    Args:
        path: Config file path (default: $KVAUTH_CLOUD_CONFIG, then
              /etc/kubernetes/azure.json)

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    load_dotenv()

    config_path = Path(path or os.getenv(CONFIG_PATH_VAR) or DEFAULT_CONFIG_FILE)
    if not config_path.exists():
        raise ConfigurationError(
            f"Cloud config file not found: {config_path}",
            context={"path": str(config_path)},
        )

    try:
        data = load_config_file(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to read cloud config file: {config_path}", cause=e
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Cloud config file must contain a mapping: {config_path}"
        )

    config = _validate(_expand_env_vars(data), str(config_path))
    logger.debug(
        "Loaded identity configuration",
        extra={
            "cloud": config.cloud or "AzurePublicCloud",
            "client_id": config.aad_client_id,
            "tenant_id": config.tenant_id,
        },
    )
    return config


def auth_config_from_env() -> AuthConfig:
    """
    Build AuthConfig from environment variables.

    Environment Variables:
        AZURE_CLOUD: Cloud environment name
        AZURE_TENANT_ID: Azure AD tenant ID
        AZURE_CLIENT_ID: Service principal client ID
        AZURE_CLIENT_SECRET: Service principal secret
        AZURE_CERTIFICATE_PATH: Path to certificate for SPN auth
        AZURE_CERTIFICATE_PASSWORD: Certificate password
        AZURE_USE_POD_IDENTITY: Set to "true" to use the NMI broker
        AZURE_SUBSCRIPTION_ID: Subscription ID
    """
    load_dotenv()

    data = {
        "cloud": os.getenv("AZURE_CLOUD", ""),
        "tenantId": os.getenv("AZURE_TENANT_ID", ""),
        "aadClientId": os.getenv("AZURE_CLIENT_ID", ""),
        "aadClientSecret": os.getenv("AZURE_CLIENT_SECRET") or None,
        "aadClientCertPath": os.getenv("AZURE_CERTIFICATE_PATH", ""),
        "aadClientCertPassword": os.getenv("AZURE_CERTIFICATE_PASSWORD") or None,
        "useIntegratedIdentity": os.getenv("AZURE_USE_POD_IDENTITY", "").lower() == "true",
        "subscriptionId": os.getenv("AZURE_SUBSCRIPTION_ID", ""),
    }
    return _validate(data, "environment")


__all__ = [
    "load_auth_config",
    "auth_config_from_env",
    "load_config_file",
    "DEFAULT_CONFIG_FILE",
]
