"""Peer list messages, id-addressed relay packets and a UDP peer registry."""

from __future__ import annotations

import struct
from typing import Iterable, Optional, Tuple

PEERLIST_REQUEST = b"PEERLIST"
PEERLIST_PREFIX = b"PEERLIST:"
MAX_CLIENTS = 64

_TARGET = struct.Struct("<i")

Address = Tuple[str, int]


def format_peer_list(ids: Iterable[int]) -> bytes:
    """Return the ``PEERLIST:`` message listing *ids*, each followed by a comma."""
    return PEERLIST_PREFIX + b"".join(b"%d," % peer_id for peer_id in ids)


def pack_relay_packet(target_id: int, payload: bytes) -> bytes:
    """Prefix *payload* with the 4-byte little-endian target id."""
    return _TARGET.pack(target_id) + payload


def unpack_relay_packet(data: bytes) -> Tuple[int, bytes]:
    """Split a relay packet into its target id and payload."""
    if len(data) < _TARGET.size:
        raise ValueError("relay packet is shorter than its 4-byte target id")
    (target_id,) = _TARGET.unpack_from(data)
    return target_id, bytes(data[_TARGET.size:])


class UdpPeerRegistry:
    """Assigns ids to UDP senders by address and routes packets between them."""

    def __init__(self, max_clients: int = MAX_CLIENTS) -> None:
        if max_clients < 0:
            raise ValueError("max_clients must not be negative")
        self._slots: list[Optional[Address]] = [None] * max_clients

    @property
    def ids(self) -> list[int]:
        """Ids of the registered peers in slot order."""
        return [slot + 1 for slot, addr in enumerate(self._slots) if addr is not None]

    def find(self, address: Address) -> Optional[int]:
        """Return the id registered for *address*, or None."""
        return next(
            (slot + 1 for slot, addr in enumerate(self._slots) if addr == address),
            None,
        )

    def register(self, address: Address) -> Optional[int]:
        """Return the id of *address*, assigning a new one if needed.

        Returns None when the address is new and every slot is taken.
        """
        existing = self.find(address)
        if existing is not None:
            return existing
        for slot, addr in enumerate(self._slots):
            if addr is None:
                self._slots[slot] = address
                return slot + 1
        return None

    def _address_of(self, peer_id: int) -> Optional[Address]:
        if 1 <= peer_id <= len(self._slots):
            return self._slots[peer_id - 1]
        return None

    def handle(self, address: Address, data: bytes) -> list[Tuple[Address, bytes]]:
        """Process one datagram from *address*; return the datagrams to send."""
        self.register(address)
        if data[: len(PEERLIST_REQUEST)] == PEERLIST_REQUEST:
            return [(address, format_peer_list(self.ids))]
        try:
            target_id, payload = unpack_relay_packet(data)
        except ValueError:
            return []
        target = self._address_of(target_id)
        if target is None:
            return []
        return [(target, payload)]