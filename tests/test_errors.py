import pytest

from gamenet.errors import ErrorCode, GameNetError, strerror


@pytest.mark.parametrize(
    "raw, expected",
    [(0, ErrorCode.OK), (-7, ErrorCode.PARAM), (-99, ErrorCode.UNKNOWN)],
)
def test_error_code_values_match_wire_constants(raw, expected):
    err = GameNetError(raw)
    assert err.code == expected
    assert strerror(raw) == strerror(expected)


@pytest.mark.parametrize(
    "code, text",
    [
        (ErrorCode.OK, "Başarılı"),
        (ErrorCode.SOCKET, "Socket oluşturulamadı"),
        (ErrorCode.BIND, "Bind başarısız"),
        (ErrorCode.CONNECT, "Bağlantı başarısız"),
        (ErrorCode.SEND, "Veri gönderilemedi"),
        (ErrorCode.RECV, "Veri alınamadı"),
        (ErrorCode.MEMORY, "Bellek yetersiz"),
        (ErrorCode.PARAM, "Geçersiz parametre"),
    ],
)
def test_strerror_known_codes(code, text):
    assert strerror(code) == text


def test_strerror_accepts_plain_int():
    assert strerror(-4) == strerror(ErrorCode.SEND)


@pytest.mark.parametrize("code", [ErrorCode.UNKNOWN, -99, 5, -1000])
def test_strerror_unknown(code):
    assert strerror(code) == "Bilinmeyen hata"


def test_gamenet_error_uses_description():
    err = GameNetError(ErrorCode.BIND)
    assert err.code is ErrorCode.BIND
    assert str(err) == "Bind başarısız"


def test_gamenet_error_custom_message():
    err = GameNetError(-3, "peer unreachable")
    assert err.code == ErrorCode.CONNECT
    assert str(err) == "peer unreachable"


def test_gamenet_error_unknown_code_kept():
    err = GameNetError(42)
    assert err.code == 42
    assert err.message == "Bilinmeyen hata"