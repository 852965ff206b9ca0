"""Helpers for safe debug logging.

Request tracing touches the Todoist access token (configuration and the
``Authorization`` header).  Response bodies logged in debug mode are not
passed through here: they are logged verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset({"accesstoken", "access_token", "authorization", "token"})


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* with token-bearing keys replaced by ``<redacted>``."""
    if isinstance(value, Mapping):
        return {
            str(k): "<redacted>"
            if str(k).lower() in _SENSITIVE_VALUE_KEYS
            else redact_for_log(v, max_string=max_string)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [redact_for_log(v, max_string=max_string) for v in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value
