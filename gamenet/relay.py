"""Relay server peer table: forwarding and broadcasting between peers by id."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ErrorCode, GameNetError

MAX_PEERS = 32

Address = Tuple[str, int]


@dataclass(eq=False)
class RelayPeer:
    """A peer known to the relay, reachable over its TCP socket or by address."""

    id: int
    address: Address
    socket: Optional[socket.socket] = None
    connected: bool = True


class RelayServer:
    """Holds up to :data:`MAX_PEERS` peers and moves data between them."""

    def __init__(self, udp_socket: Optional[socket.socket] = None) -> None:
        self.udp_socket = udp_socket
        self.peers: list[Optional[RelayPeer]] = [None] * MAX_PEERS

    @property
    def peer_count(self) -> int:
        return sum(1 for p in self.peers if p is not None and p.connected)

    def add_peer(self, peer: RelayPeer) -> int:
        """Place *peer* in the first free slot and return that slot."""
        for slot, current in enumerate(self.peers):
            if current is None or not current.connected:
                self.peers[slot] = peer
                return slot
        raise GameNetError(ErrorCode.MEMORY, "relay peer table is full")

    def get_peer_by_id(self, peer_id: int) -> Optional[RelayPeer]:
        """Return the connected peer with *peer_id*, or None."""
        return next(
            (p for p in self.peers if p is not None and p.connected and p.id == peer_id),
            None,
        )

    def _require(self, peer_id: int) -> RelayPeer:
        peer = self.get_peer_by_id(peer_id)
        if peer is None:
            raise GameNetError(ErrorCode.PARAM, f"no connected peer {peer_id}")
        return peer

    def forward(self, target_peer_id: int, data: bytes) -> None:
        """Send *data* to one peer over its TCP socket."""
        peer = self._require(target_peer_id)
        if peer.socket is None:
            raise GameNetError(ErrorCode.PARAM, f"peer {target_peer_id} has no socket")
        try:
            sent = peer.socket.send(data)
        except OSError as exc:
            raise GameNetError(ErrorCode.SEND) from exc
        if sent != len(data):
            raise GameNetError(ErrorCode.SEND)

    def broadcast(self, except_peer_id: int, data: bytes) -> int:
        """Send *data* to every connected peer but one; return how many got it all."""
        delivered = 0
        for peer in self.peers:
            if peer is None or not peer.connected or peer.id == except_peer_id:
                continue
            if peer.socket is None:
                continue
            try:
                if peer.socket.send(data) == len(data):
                    delivered += 1
            except OSError:
                pass
        return delivered

    def forward_udp(self, target_peer_id: int, data: bytes) -> None:
        """Send *data* to one peer's address over the relay's UDP socket."""
        if self.udp_socket is None:
            raise GameNetError(ErrorCode.PARAM, "relay has no UDP socket")
        peer = self._require(target_peer_id)
        try:
            sent = self.udp_socket.sendto(data, peer.address)
        except OSError as exc:
            raise GameNetError(ErrorCode.SEND) from exc
        if sent != len(data):
            raise GameNetError(ErrorCode.SEND)