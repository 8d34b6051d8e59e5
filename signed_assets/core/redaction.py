"""Redaction of signature material before URLs are written to logs.

A presigned URL is a bearer credential until it expires, so anything that
logs one goes through :func:`redact_url` first.
"""
import re
from typing import Iterable, Optional


SENSITIVE_QUERY_KEYS = (
    "X-Amz-Signature",
    "X-Amz-Credential",
    "X-Amz-Security-Token",
)


def mask_value(value: Optional[str]) -> str:
    """Replace a sensitive value with a redacted indicator.

    Short values are fully hidden; longer ones keep two characters at each
    end so log lines for different URLs can still be told apart.
    """
    if not value:
        return "[REDACTED]"
    if len(value) <= 8:
        return "[REDACTED]"
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


def _query_key_pattern(keys: Iterable[str]) -> re.Pattern:
    alternation = "|".join(re.escape(k) for k in keys)
    return re.compile(r"(?P<lead>[?&;](?:amp;)?(?:" + alternation + r")=)(?P<value>[^&#\s\"']*)", re.IGNORECASE)


_SENSITIVE_RE = _query_key_pattern(SENSITIVE_QUERY_KEYS)


def redact_url(url: Optional[str]) -> str:
    """Mask signature, credential and session-token values in a URL."""
    if not url:
        return ""
    return _SENSITIVE_RE.sub(lambda m: m.group("lead") + mask_value(m.group("value")), url)
