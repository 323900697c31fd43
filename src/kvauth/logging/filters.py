"""Log filters that keep token material out of every sink."""

import logging
import re

REDACTED = "[REDACTED]"

# Bearer header values, JWTs and key=value pairs naming a secret
_SECRET_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[A-Za-z0-9\-._~+/]+=*"),
    re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*"),
    re.compile(
        r"(?i)((?:client_secret|access_token|refresh_token|password|aadClientSecret)"
        r"[\"']?\s*[=:]\s*[\"']?)[^\s\"'&,}]+"
    ),
)


def redact_secrets(text: str) -> str:
    """Replace anything that looks like a credential with a fixed marker."""
    for pattern in _SECRET_PATTERNS:
        if pattern.groups:
            text = pattern.sub(lambda m: m.group(1) + REDACTED, text)
        else:
            text = pattern.sub(REDACTED, text)
    return text


class SecretRedactionFilter(logging.Filter):
    """
    Scrub bearer tokens and secrets from log records before they are emitted.

    The message is rendered once with its args, redacted, and stored back on
    the record so handlers downstream see only the scrubbed text.

    Usage:
        handler = logging.StreamHandler()
        handler.addFilter(SecretRedactionFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)
        record.msg = redact_secrets(message)
        record.args = None

        for field in ("error", "error_message"):
            value = getattr(record, field, None)
            if isinstance(value, str):
                setattr(record, field, redact_secrets(value))
        return True
