import socket

import pytest

from gamenet.errors import ErrorCode, GameNetError
from gamenet.relay import MAX_PEERS, RelayPeer, RelayServer


@pytest.fixture
def pairs():
    created = [socket.socketpair() for _ in range(3)]
    yield created
    for a, b in created:
        a.close()
        b.close()


def _relay_with_peers(pairs):
    relay = RelayServer()
    for peer_id, (local, _) in enumerate(pairs, start=1):
        relay.add_peer(RelayPeer(peer_id, ("127.0.0.1", 0), local))
    return relay


def test_forward_reaches_target(pairs):
    relay = _relay_with_peers(pairs)
    relay.forward(2, b"Merhaba Peer 2!")
    pairs[1][1].settimeout(2)
    assert pairs[1][1].recv(64) == b"Merhaba Peer 2!"


def test_forward_unknown_peer_raises(pairs):
    relay = _relay_with_peers(pairs)
    with pytest.raises(GameNetError) as info:
        relay.forward(99, b"x")
    assert info.value.code == ErrorCode.PARAM


def test_broadcast_skips_excepted_peer(pairs):
    relay = _relay_with_peers(pairs)
    assert relay.broadcast(1, b"all") == 2
    for _, remote in pairs[1:]:
        remote.settimeout(2)
        assert remote.recv(16) == b"all"
    pairs[0][1].setblocking(False)
    with pytest.raises(BlockingIOError):
        pairs[0][1].recv(16)


def test_get_peer_by_id_ignores_disconnected(pairs):
    relay = _relay_with_peers(pairs)
    peer = relay.get_peer_by_id(3)
    assert peer.id == 3
    peer.connected = False
    assert relay.get_peer_by_id(3) is None
    assert relay.peer_count == 2


def test_add_peer_reuses_disconnected_slot(pairs):
    relay = _relay_with_peers(pairs)
    relay.get_peer_by_id(1).connected = False
    assert relay.add_peer(RelayPeer(7, ("127.0.0.1", 0), pairs[0][0])) == 0
    assert relay.get_peer_by_id(7) is relay.peers[0]


def test_add_peer_when_full_raises():
    relay = RelayServer()
    for peer_id in range(MAX_PEERS):
        relay.add_peer(RelayPeer(peer_id, ("127.0.0.1", 0)))
    with pytest.raises(GameNetError) as info:
        relay.add_peer(RelayPeer(MAX_PEERS, ("127.0.0.1", 0)))
    assert info.value.code == ErrorCode.MEMORY


def test_forward_udp_delivers_to_peer_address():
    receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        receiver.bind(("127.0.0.1", 0))
        receiver.settimeout(2)
        relay = RelayServer(sender)
        relay.add_peer(RelayPeer(5, receiver.getsockname()))
        relay.forward_udp(5, b"udp payload")
        data, _ = receiver.recvfrom(64)
        assert data == b"udp payload"
    finally:
        receiver.close()
        sender.close()


def test_forward_udp_without_socket_raises():
    relay = RelayServer()
    relay.add_peer(RelayPeer(1, ("127.0.0.1", 9)))
    with pytest.raises(GameNetError) as info:
        relay.forward_udp(1, b"x")
    assert info.value.code == ErrorCode.PARAM