"""Minimal flat JSON helpers for string and integer fields."""

from __future__ import annotations

import re
from typing import Optional

_PATTERN_LIMIT = 63
_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _append(json: str, field: str, maxlen: Optional[int]) -> str:
    base = json
    if len(base) > 1 and base.endswith("}"):
        base = base[:-1]
    prefix = "," if len(base) > 1 else "{"
    addition = f"{prefix}{field}}}"
    if maxlen is None:
        return base + addition
    room = maxlen - len(base)
    if room <= 0:
        raise ValueError("maxlen leaves no room for the new field")
    return base + addition[: room - 1]


def set_str(json: str, key: str, value: str, maxlen: Optional[int] = None) -> str:
    """Return *json* with ``"key":"value"`` appended as the last field.

    When *maxlen* is given the result is cut to at most ``maxlen - 1`` characters.
    """
    return _append(json, f'"{key}":"{value}"', maxlen)


def set_int(json: str, key: str, value: int, maxlen: Optional[int] = None) -> str:
    """Return *json* with ``"key":value`` appended as the last field."""
    return _append(json, f'"{key}":{int(value)}', maxlen)


def _find_after(json: str, pattern: str) -> int:
    start = json.find(pattern[:_PATTERN_LIMIT])
    if start < 0:
        raise KeyError(pattern)
    return start + len(pattern[:_PATTERN_LIMIT])


def get_str(json: str, key: str, maxlen: Optional[int] = None) -> str:
    """Return the string value stored under *key*.

    Raises KeyError when the key is absent and ValueError when the value is
    unterminated. With *maxlen* the value is cut to ``maxlen - 1`` characters.
    """
    start = _find_after(json, f'"{key}":"')
    end = json.find('"', start)
    if end < 0:
        raise ValueError(f"unterminated string value for {key!r}")
    value = json[start:end]
    if maxlen is not None and len(value) >= maxlen:
        value = value[: max(maxlen - 1, 0)]
    return value


def get_int(json: str, key: str) -> int:
    """Return the integer value stored under *key*; 0 if it is not numeric."""
    start = _find_after(json, f'"{key}":')
    match = _INT_PREFIX.match(json, start)
    return int(match.group(1)) if match else 0