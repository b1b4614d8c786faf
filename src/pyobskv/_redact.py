"""Helpers for safe debug logging.

Store keys and values are opaque and may hold credentials or large blobs.
This module turns them into short, redacted representations before they
are emitted in DEBUG logs.
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping, Sequence, Set
from typing import Any

from pyobskv.models.mutation import Absent

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "api_key",
        "authorization",
        "cookie",
    }
)

_MAX_DEPTH = 20
_MAX_NODES = 1000


def _truncate(text: str, max_string: int) -> str:
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 128, max_items: int = 20) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Containers are cut after *max_items* entries, self-references are
    replaced with ``"<recursive>"`` and the whole walk visits at most
    ``_MAX_NODES`` values, so the cost does not depend on the input size.
    """
    budget = [_MAX_NODES]
    return _redact(value, max_string, max_items, 0, set(), budget)


def _redact(
    value: Any,
    max_string: int,
    max_items: int,
    depth: int,
    active: set[int],
    budget: list[int],
) -> Any:
    if depth > _MAX_DEPTH:
        return "<max-depth>"
    budget[0] -= 1
    if budget[0] < 0:
        return "<max-size>"

    if value is None or isinstance(value, Absent):
        return value

    if isinstance(value, str):
        return _truncate(value, max_string)

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<bytes:{len(value)}b>"

    if not isinstance(value, (Mapping, Sequence, Set)):
        # Fallback: represent unknown objects without dumping internals.
        return _truncate(repr(value), max_string)

    marker = id(value)
    if marker in active:
        return "<recursive>"
    active.add(marker)
    try:
        extra = len(value) - max_items
        if isinstance(value, Mapping):
            redacted: dict[str, Any] = {}
            for k, v in itertools.islice(value.items(), max_items):
                key = _truncate(str(k), max_string)
                if key.lower() in _SENSITIVE_VALUE_KEYS:
                    redacted[key] = "<redacted>"
                else:
                    redacted[key] = _redact(v, max_string, max_items, depth + 1, active, budget)
            if extra > 0:
                redacted["<more>"] = f"<+{extra} more>"
            return redacted

        items = [_redact(v, max_string, max_items, depth + 1, active, budget) for v in itertools.islice(value, max_items)]
        if extra > 0:
            items.append(f"<+{extra} more>")
        return items
    finally:
        active.discard(marker)
