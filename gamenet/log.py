"""Library-wide logging with an optional user callback."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Optional

LogCallback = Callable[[str], None]

_MAX_MESSAGE_BYTES = 511


@dataclass
class _LogState:
    callback: Optional[LogCallback] = None


_state = _LogState()


def set_log_callback(callback: Optional[LogCallback]) -> None:
    """Route log messages to *callback*; ``None`` restores writing to stderr."""
    _state.callback = callback


def _truncate(message: str) -> str:
    encoded = message.encode("utf-8")
    if len(encoded) <= _MAX_MESSAGE_BYTES:
        return message
    return encoded[:_MAX_MESSAGE_BYTES].decode("utf-8", errors="ignore")


def log(fmt: str, *args: object) -> None:
    """Format a printf-style message and deliver it to the callback or stderr."""
    message = _truncate(fmt % args if args else fmt)
    if _state.callback is not None:
        _state.callback(message)
    else:
        print(message, file=sys.stderr)