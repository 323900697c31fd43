"""Delegated identity channel backed by the node managed identity (NMI) broker."""

import logging

import requests
from pydantic import ValidationError

from kvauth.auth.channels.base import IdentityChannel
from kvauth.auth.credentials import ManualTokenCredential
from kvauth.auth.models import DelegatedTokenResponse, IdentityContext
from kvauth.environment import CloudEnvironment
from kvauth.errors import (
    BrokerDecodeError,
    BrokerIncompleteResponseError,
    BrokerResponseError,
    BrokerTransportError,
    BrokerUnreachableError,
    InvalidResourceError,
    MissingIdentityContextError,
)

logger = logging.getLogger(__name__)

NMI_ENDPOINT = "http://localhost:2579/host/token/"
POD_NAME_HEADER = "podname"
POD_NAMESPACE_HEADER = "podns"

# The broker is node-local; anything slower than this is a hang
DEFAULT_BROKER_TIMEOUT = 10.0


class DelegatedIdentityChannel(IdentityChannel):
    """
    Acquire tokens from the NMI broker on behalf of a pod.

    The broker resolves the pod's assigned managed identity and returns an
    already-issued token, so no OAuth exchange happens here. One GET request
    per acquisition; no retry.
    """

    name = "delegated"

    def __init__(
        self,
        identity: IdentityContext,
        environment: CloudEnvironment,
        broker_endpoint: str = NMI_ENDPOINT,
        timeout: float | tuple[float, float] = DEFAULT_BROKER_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """
        Initialize delegated channel.

        Args:
            identity: Pod name and namespace forwarded as broker headers
            environment: Resolved cloud environment
            broker_endpoint: NMI token endpoint
            timeout: requests timeout (seconds, or (connect, read) tuple)
            session: Optional caller-owned session (adapters, cancellation)
        """
        super().__init__(environment)
        self.identity = identity
        self.broker_endpoint = broker_endpoint
        self.timeout = timeout
        self._session = session

    def _get(self, resource: str) -> requests.Response:
        headers = {
            POD_NAMESPACE_HEADER: self.identity.pod_namespace,
            POD_NAME_HEADER: self.identity.pod_name,
        }
        params = {"resource": resource}
        if self._session is not None:
            return self._session.get(
                self.broker_endpoint, params=params, headers=headers, timeout=self.timeout
            )
        return requests.get(
            self.broker_endpoint, params=params, headers=headers, timeout=self.timeout
        )

    def acquire_token(self, resource: str) -> ManualTokenCredential:
        """
        Request a token for the pod's identity from the broker.

        Raises:
            InvalidResourceError: Empty resource
            MissingIdentityContextError: Pod name or namespace missing
            BrokerUnreachableError: Connection refused or timed out
            BrokerTransportError: Other transport failure
            BrokerResponseError: Non-200 status
            BrokerDecodeError: Body is not the expected JSON
            BrokerIncompleteResponseError: Empty client id or access token
        """
        if not resource:
            raise InvalidResourceError("resource must not be empty")
        if not self.identity.is_complete:
            raise MissingIdentityContextError(
                "pod name and namespace are required for delegated identity",
                context={
                    "pod_name": self.identity.pod_name,
                    "pod_namespace": self.identity.pod_namespace,
                },
            )

        logger.info(
            "azure: using managed identity extension to retrieve access token",
            extra={"resource": resource, "broker_endpoint": self.broker_endpoint},
        )

        context = {"resource": resource, "broker_endpoint": self.broker_endpoint}
        try:
            response = self._get(resource)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise BrokerUnreachableError(
                f"nmi broker unreachable at {self.broker_endpoint}",
                cause=e,
                context=context,
            ) from e
        except requests.RequestException as e:
            raise BrokerTransportError(
                "nmi request failed", cause=e, context=context
            ) from e

        if response.status_code != requests.codes.ok:
            raise BrokerResponseError(response.status_code, context=context)

        try:
            payload = DelegatedTokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            # ValidationError text echoes input values; keep it out of the message
            raise BrokerDecodeError(
                "nmi response body is not a valid token response",
                cause=e,
                context=context,
            ) from e

        if not payload.is_complete:
            raise BrokerIncompleteResponseError(
                "nmi did not return expected values in response: token and clientid",
                context=context,
            )

        credential = ManualTokenCredential(payload.token, payload.client_id, resource)
        logger.debug(
            "Acquired delegated token",
            extra={
                "resource": resource,
                "client_id": payload.client_id,
                "expires_on": credential.expires_on,
            },
        )
        return credential


__all__ = [
    "DelegatedIdentityChannel",
    "NMI_ENDPOINT",
    "POD_NAME_HEADER",
    "POD_NAMESPACE_HEADER",
    "DEFAULT_BROKER_TIMEOUT",
]
