"""Error codes used across the networking toolkit and their descriptions."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric result codes reported by network operations."""

    OK = 0
    SOCKET = -1
    BIND = -2
    CONNECT = -3
    SEND = -4
    RECV = -5
    MEMORY = -6
    PARAM = -7
    UNKNOWN = -99


_DESCRIPTIONS = {
    ErrorCode.OK: "Başarılı",
    ErrorCode.SOCKET: "Socket oluşturulamadı",
    ErrorCode.BIND: "Bind başarısız",
    ErrorCode.CONNECT: "Bağlantı başarısız",
    ErrorCode.SEND: "Veri gönderilemedi",
    ErrorCode.RECV: "Veri alınamadı",
    ErrorCode.MEMORY: "Bellek yetersiz",
    ErrorCode.PARAM: "Geçersiz parametre",
}

_UNKNOWN_DESCRIPTION = "Bilinmeyen hata"


def strerror(code: int) -> str:
    """Return the human-readable description of an error code."""
    try:
        return _DESCRIPTIONS.get(ErrorCode(code), _UNKNOWN_DESCRIPTION)
    except ValueError:
        return _UNKNOWN_DESCRIPTION


class GameNetError(Exception):
    """Raised when a network operation fails; carries an :class:`ErrorCode`."""

    def __init__(self, code: int, message: str | None = None) -> None:
        try:
            self.code: int = ErrorCode(code)
        except ValueError:
            self.code = code
        self.message = message if message is not None else strerror(code)
        super().__init__(self.message)