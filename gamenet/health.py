"""Connection health: ping/pong latency tracking and automatic reconnects."""

from __future__ import annotations

import socket
import struct
import time
from dataclasses import dataclass
from itertools import islice
from typing import Callable, Iterable, Optional, Protocol, Tuple

from .errors import ErrorCode, GameNetError

PING_MAGIC = 0x50494E47
PONG_MAGIC = 0x504F4E47
PING_INTERVAL = 5
MAX_PEERS = 16

RECONNECTING = 0
RECONNECTED = 1
RECONNECT_FAILED = -1

_MAGIC = struct.Struct("<I")
_PING = struct.Struct("<IQ")

ReconnectCallback = Callable[["ReconnectPolicy", int], None]


class _Sender(Protocol):
    def send(self, data: bytes) -> int: ...


class _Peer(Protocol):
    connected: bool
    socket: _Sender


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else int(now)


class PingPong:
    """Sends periodic pings to connected peers and records their latency."""

    def __init__(self, max_peers: int = MAX_PEERS) -> None:
        if max_peers < 0:
            raise ValueError("max_peers must not be negative")
        self.max_peers = max_peers
        self.enabled = False
        self._latency = [0] * max_peers
        self._last_ping_sent = [0] * max_peers

    def enable(self, enabled: bool) -> None:
        """Switch ping sending on or off."""
        self.enabled = bool(enabled)

    def latency(self, peer_id: int) -> int:
        """Return the last measured latency of *peer_id* in milliseconds."""
        if not 0 <= peer_id < self.max_peers:
            raise IndexError(f"peer id {peer_id} out of range")
        return self._latency[peer_id]

    def tick(self, peers: Iterable[_Peer], now: Optional[int] = None) -> list[int]:
        """Ping every connected peer whose last ping is old enough.

        Returns the indexes of the peers that were pinged.
        """
        if not self.enabled:
            return []
        current = _now(now)
        pinged = []
        for index, peer in enumerate(islice(peers, self.max_peers)):
            if not peer.connected:
                continue
            if current - self._last_ping_sent[index] >= PING_INTERVAL:
                self._last_ping_sent[index] = current
                peer.socket.send(_PING.pack(PING_MAGIC, current))
                pinged.append(index)
        return pinged

    def handle_packet(
        self, peer_idx: int, sock: _Sender, data: bytes, now: Optional[int] = None
    ) -> bool:
        """Answer a ping or record a pong; return True if *data* was consumed."""
        if len(data) < _PING.size:
            return False
        (magic,) = _MAGIC.unpack_from(data)
        if magic == PING_MAGIC:
            sock.send(_MAGIC.pack(PONG_MAGIC))
            return True
        if magic == PONG_MAGIC:
            elapsed = _now(now) - self._last_ping_sent[peer_idx]
            self._latency[peer_idx] = int(elapsed) * 1000
            return True
        return False


@dataclass
class ReconnectPolicy:
    """How and whether a dropped TCP connection is re-established."""

    enabled: bool = False
    max_attempts: int = 3
    interval_ms: int = 2000
    callback: Optional[ReconnectCallback] = None

    def configure(self, enable: bool, max_attempts: int, interval_ms: int) -> None:
        """Enable or disable reconnects; non-positive limits keep their values."""
        self.enabled = bool(enable)
        if max_attempts > 0:
            self.max_attempts = max_attempts
        if interval_ms > 0:
            self.interval_ms = interval_ms

    def set_callback(self, callback: Optional[ReconnectCallback]) -> None:
        """Call *callback(policy, status)* on each reconnect state change."""
        self.callback = callback

    def _notify(self, status: int) -> None:
        if self.callback is not None:
            self.callback(self, status)

    def reconnect(self, address: Tuple[str, int]) -> socket.socket:
        """Connect to *address*, retrying; return the connected socket.

        Raises GameNetError when reconnects are disabled or every attempt fails.
        """
        if not self.enabled:
            raise GameNetError(ErrorCode.CONNECT, "reconnect is disabled")
        for _ in range(self.max_attempts):
            self._notify(RECONNECTING)
            try:
                sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            except OSError:
                sock = None
            if sock is not None:
                try:
                    sock.connect(address)
                except OSError:
                    sock.close()
                else:
                    self._notify(RECONNECTED)
                    return sock
            time.sleep(self.interval_ms / 1000)
        self._notify(RECONNECT_FAILED)
        raise GameNetError(ErrorCode.CONNECT)