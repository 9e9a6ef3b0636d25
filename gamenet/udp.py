"""UDP server and client with optional background receive threads."""

from __future__ import annotations

import select
import socket
import threading
from typing import Any, Callable, Optional, Tuple

from .errors import ErrorCode, GameNetError

AUTO_BUFFER_SIZE = 65536

_RECV_SIZE = 2048
_POLL_SECONDS = 0.2
_JOIN_SECONDS = 1.0

Address = Tuple[str, int]
ServerReceive = Callable[[Address, bytes, Any], None]
ClientReceive = Callable[[bytes], None]


def _set_buffers(sock: socket.socket, size: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, size)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, size)


def _new_udp_socket() -> socket.socket:
    try:
        return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        raise GameNetError(ErrorCode.SOCKET) from exc


def _receive_loop(
    sock: socket.socket,
    running: threading.Event,
    deliver: Callable[[Address, bytes], None],
) -> None:
    while running.is_set():
        try:
            readable, _, _ = select.select([sock], [], [], _POLL_SECONDS)
        except (OSError, ValueError):
            break
        if not readable:
            continue
        try:
            data, addr = sock.recvfrom(_RECV_SIZE)
        except OSError:
            if sock.fileno() < 0:
                break
            continue
        if data:
            deliver((addr[0], addr[1]), data)


class UdpServer:
    """A bound UDP socket that hands each datagram to a callback."""

    def __init__(
        self,
        port: int,
        on_receive: Optional[ServerReceive] = None,
        user_data: Any = None,
        host: str = "",
    ) -> None:
        self.on_receive = on_receive
        self.user_data = user_data
        self.buffer_size = 0
        self.autobufferassign = False
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        sock = _new_udp_socket()
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            raise GameNetError(ErrorCode.BIND) from exc
        self.socket = sock

    @property
    def address(self) -> Address:
        """The address the server is bound to."""
        host, port = self.socket.getsockname()[:2]
        return host, port

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "UdpServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_async()

    def sendto(self, address: Address, data: bytes) -> int:
        """Send one datagram to *address*; return the number of bytes sent."""
        try:
            return self.socket.sendto(data, address)
        except OSError as exc:
            raise GameNetError(ErrorCode.SEND) from exc

    def _deliver(self, address: Address, data: bytes) -> None:
        if self.on_receive is not None:
            self.on_receive(address, data, self.user_data)

    def start_async(self) -> None:
        """Receive datagrams on a background thread."""
        if self._thread is not None:
            raise GameNetError(ErrorCode.PARAM, "server is already running")
        self._running.set()
        self._thread = threading.Thread(
            target=_receive_loop,
            args=(self.socket, self._running, self._deliver),
            daemon=True,
        )
        self._thread.start()

    def stop_async(self) -> None:
        """Stop the receive thread and close the socket."""
        self._running.clear()
        if self._thread is not None:
            self._thread.join(_JOIN_SECONDS)
            self._thread = None
        self.socket.close()

    def set_buffer_size(self, size: int) -> None:
        self.buffer_size = size
        _set_buffers(self.socket, size)

    def set_autobufferassign(self, enable: bool) -> None:
        self.autobufferassign = bool(enable)
        if enable:
            _set_buffers(self.socket, AUTO_BUFFER_SIZE)
            self.buffer_size = AUTO_BUFFER_SIZE


class UdpClient:
    """A UDP socket aimed at one server address."""

    def __init__(self, host: str, port: int, user_data: Any = None) -> None:
        self.server_address: Address = (host, port)
        self.user_data = user_data
        self.buffer_size = 0
        self.autobufferassign = False
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.socket = _new_udp_socket()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "UdpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_async()

    def send(self, data: bytes) -> int:
        """Send one datagram to the server; return the number of bytes sent."""
        try:
            return self.socket.sendto(data, self.server_address)
        except OSError as exc:
            raise GameNetError(ErrorCode.SEND) from exc

    def start_async(self, on_receive: Optional[ClientReceive]) -> None:
        """Receive datagrams on a background thread and pass them to *on_receive*."""
        if self._thread is not None:
            raise GameNetError(ErrorCode.PARAM, "client is already running")

        def deliver(_address: Address, data: bytes) -> None:
            if on_receive is not None:
                on_receive(data)

        self._running.set()
        self._thread = threading.Thread(
            target=_receive_loop,
            args=(self.socket, self._running, deliver),
            daemon=True,
        )
        self._thread.start()

    def stop_async(self) -> None:
        """Stop the receive thread and close the socket."""
        self._running.clear()
        if self._thread is not None:
            self._thread.join(_JOIN_SECONDS)
            self._thread = None
        self.socket.close()

    def set_buffer_size(self, size: int) -> None:
        self.buffer_size = size
        _set_buffers(self.socket, size)

    def set_autobufferassign(self, enable: bool) -> None:
        self.autobufferassign = bool(enable)
        if enable:
            _set_buffers(self.socket, AUTO_BUFFER_SIZE)
            self.buffer_size = AUTO_BUFFER_SIZE