"""Credential check for a Key Vault FlexVolume identity configuration. Use --help for usage."""

import argparse
import logging
import sys
from datetime import UTC, datetime

from kvauth.auth import IdentityContext, acquire_keyvault_authorizer, acquire_management_authorizer
from kvauth.auth.channels import DEFAULT_BROKER_TIMEOUT, NMI_ENDPOINT
from kvauth.config import auth_config_from_env, load_auth_config
from kvauth.errors import KVAuthError
from kvauth.logging import setup_logging

logger = logging.getLogger(__name__)

TARGETS = {
    "keyvault": acquire_keyvault_authorizer,
    "management": acquire_management_authorizer,
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kvauth",
        description="Acquire a token for the configured identity and report its expiry.",
    )
    parser.add_argument(
        "--cloud-config",
        help="Path of the cloud config file (default: $KVAUTH_CLOUD_CONFIG or /etc/kubernetes/azure.json)",
    )
    parser.add_argument(
        "--from-env",
        action="store_true",
        help="Build the configuration from AZURE_* environment variables",
    )
    parser.add_argument("--target", choices=sorted(TARGETS), default="keyvault")
    parser.add_argument("--pod-name", help="Pod name (default: $POD_NAME)")
    parser.add_argument("--pod-namespace", help="Pod namespace (default: $POD_NAMESPACE)")
    parser.add_argument("--broker-endpoint", default=NMI_ENDPOINT)
    parser.add_argument("--broker-timeout", type=float, default=DEFAULT_BROKER_TIMEOUT)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(level=args.log_level, json_format=args.json_logs)

    env_identity = IdentityContext.from_env()
    identity = IdentityContext(
        pod_name=args.pod_name or env_identity.pod_name,
        pod_namespace=args.pod_namespace or env_identity.pod_namespace,
    )

    try:
        config = auth_config_from_env() if args.from_env else load_auth_config(args.cloud_config)
        authorizer = TARGETS[args.target](
            config,
            identity,
            broker_endpoint=args.broker_endpoint,
            broker_timeout=args.broker_timeout,
        )
        token = authorizer.credential.get_token(authorizer.scope)
    except KVAuthError as e:
        logger.error(
            "Token acquisition failed: %s",
            e,
            extra={"error": str(e), "error_category": e.category.value},
        )
        return 1

    expires = datetime.fromtimestamp(token.expires_on, UTC).isoformat()
    logger.info(
        "Token acquired",
        extra={
            "client_id": authorizer.client_id,
            "resource": authorizer.credential.resource,
            "expires_on": token.expires_on,
        },
    )
    print(f"ok client_id={authorizer.client_id} scope={authorizer.scope} expires={expires}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
