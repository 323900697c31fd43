"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_cloud: ContextVar[str] = ContextVar("cloud", default="")
_pod_name: ContextVar[str] = ContextVar("pod_name", default="")
_pod_namespace: ContextVar[str] = ContextVar("pod_namespace", default="")
_channel: ContextVar[str] = ContextVar("channel", default="")


def set_log_context(
    cloud: Optional[str] = None,
    pod_name: Optional[str] = None,
    pod_namespace: Optional[str] = None,
    channel: Optional[str] = None,
) -> None:
    if cloud is not None:
        _cloud.set(cloud)
    if pod_name is not None:
        _pod_name.set(pod_name)
    if pod_namespace is not None:
        _pod_namespace.set(pod_namespace)
    if channel is not None:
        _channel.set(channel)


def get_log_context() -> Dict[str, str]:
    return {
        "cloud": _cloud.get(),
        "pod_name": _pod_name.get(),
        "pod_namespace": _pod_namespace.get(),
        "channel": _channel.get(),
    }


def clear_log_context() -> None:
    _cloud.set("")
    _pod_name.set("")
    _pod_namespace.set("")
    _channel.set("")
