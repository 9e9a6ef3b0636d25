import pytest

from gamenet.peerlist import (
    UdpPeerRegistry,
    format_peer_list,
    pack_relay_packet,
    unpack_relay_packet,
)

ALICE = ("127.0.0.1", 40001)
BOB = ("127.0.0.1", 40002)


def test_format_peer_list():
    assert format_peer_list([1, 2]) == b"PEERLIST:1,2,"
    assert format_peer_list([]) == b"PEERLIST:"


def test_pack_relay_packet_wire_bytes():
    assert pack_relay_packet(7, b"hi") == b"\x07\x00\x00\x00hi"


@pytest.mark.parametrize("target_id", [0, 3, 64, -1, 2**31 - 1])
def test_relay_packet_round_trip(target_id):
    payload = b"Merhaba Peer %d!" % target_id
    assert unpack_relay_packet(pack_relay_packet(target_id, payload)) == (target_id, payload)


def test_unpack_short_packet_raises():
    with pytest.raises(ValueError):
        unpack_relay_packet(b"\x01\x00")


def test_register_assigns_sequential_ids():
    registry = UdpPeerRegistry()
    assert registry.register(ALICE) == 1
    assert registry.register(BOB) == 2
    assert registry.register(ALICE) == 1
    assert registry.find(BOB) == 2
    assert registry.find(("127.0.0.1", 1)) is None
    assert registry.ids == [1, 2]


def test_register_when_full_returns_none():
    registry = UdpPeerRegistry(1)
    assert registry.register(ALICE) == 1
    assert registry.register(BOB) is None
    assert registry.find(BOB) is None


def test_handle_peerlist_request_registers_and_replies():
    registry = UdpPeerRegistry()
    registry.register(ALICE)
    replies = registry.handle(BOB, b"PEERLIST")
    assert replies == [(BOB, format_peer_list([1, 2]))]


def test_handle_routes_relay_packet():
    registry = UdpPeerRegistry()
    registry.register(ALICE)
    registry.register(BOB)
    replies = registry.handle(ALICE, pack_relay_packet(2, b"ping"))
    assert replies == [(BOB, b"ping")]


def test_handle_unknown_target_or_short_data_sends_nothing():
    registry = UdpPeerRegistry()
    assert registry.handle(ALICE, pack_relay_packet(9, b"x")) == []
    assert registry.handle(ALICE, b"ab") == []
    assert registry.find(ALICE) == 1


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        UdpPeerRegistry(-1)