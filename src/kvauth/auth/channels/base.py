"""Base identity channel interface."""

from abc import ABC, abstractmethod

from kvauth.auth.credentials import Credential
from kvauth.environment import CloudEnvironment


class IdentityChannel(ABC):
    """
    Abstract base class for identity channels.

    A channel turns a resource URI into a credential using one credential
    exchange protocol (NMI broker, client secret, client certificate).
    Channels are built per acquisition and hold no shared state.
    """

    #: Short channel name used in logs ("delegated", "client_secret", ...)
    name: str = "unknown"

    def __init__(self, environment: CloudEnvironment):
        """
        Initialize channel.

        Args:
            environment: Resolved cloud environment (authority, endpoints)
        """
        self.environment = environment

    @abstractmethod
    def acquire_token(self, resource: str) -> Credential:
        """
        Acquire a credential for a resource.

        Args:
            resource: Resource URI (e.g., "https://vault.azure.net")

        Returns:
            Credential usable as a bearer token source

        Raises:
            KVAuthError: Typed failure describing why acquisition failed
        """
        pass


__all__ = ["IdentityChannel"]
