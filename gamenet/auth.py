"""Shared authentication tokens for server and client handshakes."""

from __future__ import annotations

from typing import Optional

_TOKEN_LIMIT = 63

_tokens = {"server": "", "client": ""}


def _store(kind: str, token: Optional[str]) -> None:
    if token is not None:
        _tokens[kind] = token[:_TOKEN_LIMIT]


def set_server_token(token: Optional[str]) -> None:
    """Set the token servers expect; ``None`` leaves the current one in place."""
    _store("server", token)


def set_client_token(token: Optional[str]) -> None:
    """Set the token clients present; ``None`` leaves the current one in place."""
    _store("client", token)


def server_token() -> str:
    """Return the current server token (empty when unset)."""
    return _tokens["server"]


def client_token() -> str:
    """Return the current client token (empty when unset)."""
    return _tokens["client"]