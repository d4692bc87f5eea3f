"""Shrink history requests and payloads before they reach DEBUG logs.

Requests carry the API key as ``Authorization: Apikey <key>`` and a single
``/data/histohour`` answer holds up to 2001 hourly records.  Key-bearing
fields are replaced with ``<redacted>``; record lists are cut to a few
entries plus a count of the rest.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

#: Keys under which the API key can travel (header or query parameter).
_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset({"api_key", "apikey", "authorization"})


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 5, _depth: int = 0) -> Any:
    """Copy *value* with API keys masked and record lists cut to *max_items*."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        items = [redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1) for v in value[:max_items]]
        if len(value) > max_items:
            items.append(f"<{len(value) - max_items} more>")
        return items

    return repr(value)
