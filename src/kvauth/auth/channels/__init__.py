from kvauth.auth.channels.base import IdentityChannel
from kvauth.auth.channels.delegated import (
    DEFAULT_BROKER_TIMEOUT,
    NMI_ENDPOINT,
    DelegatedIdentityChannel,
)
from kvauth.auth.channels.static import CertificateCredentialChannel, StaticCredentialChannel

__all__ = [
    "IdentityChannel",
    "DelegatedIdentityChannel",
    "StaticCredentialChannel",
    "CertificateCredentialChannel",
    "NMI_ENDPOINT",
    "DEFAULT_BROKER_TIMEOUT",
]
