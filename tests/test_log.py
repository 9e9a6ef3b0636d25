import pytest

from gamenet import log as gamelog


@pytest.fixture(autouse=True)
def reset_callback():
    gamelog.set_log_callback(None)
    yield
    gamelog.set_log_callback(None)


def test_callback_receives_formatted_message():
    received = []
    gamelog.set_log_callback(received.append)
    gamelog.log("[RELAY] Peer %d bağlandı.", 3)
    assert received == ["[RELAY] Peer 3 bağlandı."]


def test_message_without_args_is_passed_verbatim():
    received = []
    gamelog.set_log_callback(received.append)
    gamelog.log("Relay sunucu başlatıldı. Port: 12345")
    assert received == ["Relay sunucu başlatıldı. Port: 12345"]


def test_stderr_when_no_callback(capsys):
    gamelog.log("Client %d -> Client %d (%d byte)", 1, 2, 10)
    captured = capsys.readouterr()
    assert captured.err == "Client 1 -> Client 2 (10 byte)\n"
    assert captured.out == ""


def test_reset_callback_goes_back_to_stderr(capsys):
    received = []
    gamelog.set_log_callback(received.append)
    gamelog.set_log_callback(None)
    gamelog.log("hello")
    assert received == []
    assert capsys.readouterr().err == "hello\n"


def test_long_message_is_truncated():
    received = []
    gamelog.set_log_callback(received.append)
    gamelog.log("%s", "a" * 2000)
    assert len(received) == 1
    assert received[0] == "a" * 511


def test_truncation_does_not_split_multibyte_characters():
    received = []
    gamelog.set_log_callback(received.append)
    gamelog.log("%s", "ş" * 400)
    message = received[0]
    assert len(message.encode("utf-8")) <= 511
    assert set(message) == {"ş"}