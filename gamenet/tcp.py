"""Slot-based TCP server and a simple TCP client with optional background threads."""

from __future__ import annotations

import select
import socket
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from .errors import ErrorCode, GameNetError

MAX_CLIENTS = 128
KEEPALIVE_INTERVAL = 30
KEEPALIVE_MESSAGE = b"GNS_KEEPALIVE"
CLIENT_TIMEOUT = 60
AUTO_BUFFER_SIZE = 65536

_RECV_SIZE = 1024
_POLL_SECONDS = 1.0

Address = Tuple[str, int]


@dataclass(eq=False)
class ClientHandle:
    """A client connected to a :class:`TcpServer`, identified by its slot."""

    id: int
    socket: socket.socket
    address: Address
    last_active: int = 0
    user_data: Any = None


ServerReceive = Callable[[ClientHandle, bytes], None]
ServerEvent = Callable[[ClientHandle], None]
ClientReceive = Callable[[bytes], None]


def _set_buffers(sock: socket.socket, size: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, size)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, size)


class TcpServer:
    """Listens for TCP clients and dispatches their data to callbacks."""

    def __init__(
        self,
        port: int,
        on_receive: Optional[ServerReceive] = None,
        on_connect: Optional[ServerEvent] = None,
        on_disconnect: Optional[ServerEvent] = None,
        host: str = "",
    ) -> None:
        self.on_receive = on_receive
        self.on_connect = on_connect
        self.on_disconnect = on_disconnect
        self.buffer_size = 0
        self.autobufferassign = False
        self._clients: list[Optional[ClientHandle]] = [None] * MAX_CLIENTS
        self._lock = threading.RLock()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._closed = False
        try:
            listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise GameNetError(ErrorCode.SOCKET) from exc
        try:
            listener.bind((host, port))
        except OSError as exc:
            listener.close()
            raise GameNetError(ErrorCode.BIND) from exc
        listener.listen(MAX_CLIENTS)
        self._listener = listener
        self._wake_reader, self._wake_writer = socket.socketpair()

    @property
    def address(self) -> Address:
        """The address the server is listening on."""
        host, port = self._listener.getsockname()[:2]
        return host, port

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "TcpServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_async()

    def _wake(self) -> None:
        try:
            self._wake_writer.send(b"\0")
        except OSError:
            pass

    def run(self) -> None:
        """Accept clients and dispatch their data until the server is stopped."""
        while not self._stopping.is_set():
            with self._lock:
                active = [c for c in self._clients if c is not None]
            watched = [self._listener, self._wake_reader, *(c.socket for c in active)]
            try:
                readable, _, _ = select.select(watched, [], [], _POLL_SECONDS)
            except (OSError, ValueError):
                if self._closed:
                    break
                continue
            if self._wake_reader in readable:
                try:
                    self._wake_reader.recv(64)
                except OSError:
                    pass
                continue
            if self._listener in readable:
                self._accept()
            for client in active:
                if client.socket in readable:
                    self._receive(client)

    def _accept(self) -> None:
        try:
            conn, addr = self._listener.accept()
        except OSError:
            return
        with self._lock:
            slot = next((i for i, c in enumerate(self._clients) if c is None), None)
            if slot is None:
                conn.close()
                return
            handle = ClientHandle(slot, conn, (addr[0], addr[1]), int(time.time()))
            self._clients[slot] = handle
        if self.on_connect is not None:
            self.on_connect(handle)

    def _receive(self, client: ClientHandle) -> None:
        try:
            data = client.socket.recv(_RECV_SIZE)
        except OSError:
            data = b""
        if not data:
            self._drop(client)
            return
        client.last_active = int(time.time())
        if data == KEEPALIVE_MESSAGE:
            return
        if self.on_receive is not None:
            self.on_receive(client, data)

    def _drop(self, client: ClientHandle) -> None:
        with self._lock:
            if self._clients[client.id] is not client:
                return
            self._clients[client.id] = None
            client.socket.close()
        if self.on_disconnect is not None:
            self.on_disconnect(client)

    def _slot(self, client: Union[int, ClientHandle]) -> Optional[ClientHandle]:
        client_id = client.id if isinstance(client, ClientHandle) else client
        if not 0 <= client_id < MAX_CLIENTS:
            return None
        with self._lock:
            return self._clients[client_id]

    def send(self, client_id: Union[int, ClientHandle], data: bytes) -> int:
        """Send *data* to one client; return the number of bytes sent."""
        key = client_id.id if isinstance(client_id, ClientHandle) else client_id
        if not 0 <= key < MAX_CLIENTS:
            raise GameNetError(ErrorCode.PARAM, f"client id {key} out of range")
        handle = self._slot(key)
        if handle is None:
            raise GameNetError(ErrorCode.PARAM, f"client {key} is not connected")
        try:
            return handle.socket.send(data)
        except OSError as exc:
            raise GameNetError(ErrorCode.SEND) from exc

    def stop(self) -> None:
        """Close every client connection and the listening socket."""
        if self._closed:
            return
        self._stopping.set()
        with self._lock:
            self._closed = True
            for index, client in enumerate(self._clients):
                if client is not None:
                    client.socket.close()
                    self._clients[index] = None
        self._listener.close()
        self._wake_reader.close()
        self._wake_writer.close()

    def start_async(self) -> None:
        """Run the server loop on a background thread."""
        if self._thread is not None:
            raise GameNetError(ErrorCode.PARAM, "server is already running")
        self._stopping.clear()
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def stop_async(self) -> None:
        """Stop the background thread, if any, and shut the server down."""
        self._stopping.set()
        if self._thread is not None:
            if not self._closed:
                self._wake()
            self._thread.join()
            self._thread = None
        self.stop()

    def client_count(self) -> int:
        with self._lock:
            return sum(1 for c in self._clients if c is not None)

    def kick(self, client_id: Union[int, ClientHandle]) -> None:
        """Disconnect a client; unknown ids are ignored."""
        handle = self._slot(client_id)
        if handle is not None:
            self._drop(handle)

    def broadcast(self, data: bytes) -> int:
        """Send *data* to every client; return how many received all of it."""
        with self._lock:
            active = [c for c in self._clients if c is not None]
        delivered = 0
        for client in active:
            try:
                if client.socket.send(data) == len(data):
                    delivered += 1
            except OSError:
                pass
        return delivered

    def get_client(self, client_id: int) -> Optional[ClientHandle]:
        """Return the client in slot *client_id*, or None if the slot is free."""
        return self._slot(client_id)

    def set_buffer_size(self, size: int) -> None:
        self.buffer_size = size
        _set_buffers(self._listener, size)

    def set_autobufferassign(self, enable: bool) -> None:
        self.autobufferassign = bool(enable)
        if enable:
            _set_buffers(self._listener, AUTO_BUFFER_SIZE)
            self.buffer_size = AUTO_BUFFER_SIZE


class TcpClient:
    """A TCP connection to a server that passes received data to a callback."""

    def __init__(self, host: str, port: int, on_receive: Optional[ClientReceive] = None) -> None:
        self.on_receive = on_receive
        self.buffer_size = 0
        self.autobufferassign = False
        self._thread: Optional[threading.Thread] = None
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise GameNetError(ErrorCode.SOCKET) from exc
        try:
            sock.connect((host, port))
        except OSError as exc:
            sock.close()
            raise GameNetError(ErrorCode.CONNECT) from exc
        self.socket = sock

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "TcpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_async()

    def send(self, data: bytes) -> int:
        """Send *data* to the server; return the number of bytes sent."""
        try:
            return self.socket.send(data)
        except OSError as exc:
            raise GameNetError(ErrorCode.SEND) from exc

    def run(self) -> None:
        """Receive data until the connection closes."""
        while True:
            try:
                data = self.socket.recv(_RECV_SIZE)
            except OSError:
                break
            if not data:
                break
            if self.on_receive is not None:
                self.on_receive(data)

    def stop(self) -> None:
        self.socket.close()

    def start_async(self) -> None:
        """Run the receive loop on a background thread."""
        if self._thread is not None:
            raise GameNetError(ErrorCode.PARAM, "client is already running")
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def stop_async(self) -> None:
        """Close the connection and wait for the receive thread to finish."""
        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self.stop()

    def set_buffer_size(self, size: int) -> None:
        self.buffer_size = size
        _set_buffers(self.socket, size)

    def set_autobufferassign(self, enable: bool) -> None:
        self.autobufferassign = bool(enable)
        if enable:
            _set_buffers(self.socket, AUTO_BUFFER_SIZE)
            self.buffer_size = AUTO_BUFFER_SIZE