"""Command-line front end: demo servers, clients and relay peers."""

from __future__ import annotations

import argparse
import re
import socket
import sys
from typing import Callable, Optional, Sequence

from .errors import GameNetError
from .health import RECONNECT_FAILED, RECONNECTED, RECONNECTING, ReconnectPolicy
from .log import log
from .peerlist import PEERLIST_REQUEST, pack_relay_packet, unpack_relay_packet
from .relay import RelayPeer, RelayServer
from .tcp import ClientHandle, TcpClient, TcpServer
from .udp import UdpClient, UdpServer

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12345

_RECV_SIZE = 512
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_COMMANDS_HELP = (
    "\nKomutlar: [c]lient sayısı, [b]roadcast, [k]ick <id>, [m]esaj <id>, [q]uit"
)


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _wait_for_enter() -> None:
    sys.stdin.readline()


def _recv(sock: socket.socket, udp: bool = False) -> bytes:
    try:
        return sock.recvfrom(_RECV_SIZE)[0] if udp else sock.recv(_RECV_SIZE)
    except OSError:
        return b""


def _cmd_server(args: argparse.Namespace) -> int:
    def on_receive(client: ClientHandle, data: bytes) -> None:
        ip, port = client.address
        print(f"[SERVER] {ip}:{port} -> {_text(data)}")
        try:
            server.send(client, f"[SERVER] Merhaba {ip}:{port}!".encode())
        except GameNetError:
            pass

    def on_connect(client: ClientHandle) -> None:
        print(f"[SERVER] Yeni bağlantı: {client.id}")

    def on_disconnect(client: ClientHandle) -> None:
        print(f"[SERVER] Bağlantı koptu: {client.id}")

    try:
        server = TcpServer(args.port, on_receive, on_connect, on_disconnect, host=args.host)
    except GameNetError:
        print("Sunucu başlatılamadı!")
        return 1
    server.set_autobufferassign(True)
    print(f"Sunucu başlatıldı. Port: {server.address[1]}")
    server.start_async()
    try:
        while True:
            print(_COMMANDS_HELP)
            line = sys.stdin.readline()
            if not line:
                break
            command = line[:1]
            if command == "c":
                print(f"Bağlı istemci sayısı: {server.client_count()}")
            elif command == "b":
                server.broadcast("[SERVER] Merhaba tüm istemcilere!".encode())
                print("Broadcast gönderildi.")
            elif command == "k":
                client_id = _atoi(line[2:])
                server.kick(client_id)
                print(f"{client_id} numaralı istemci atıldı.")
            elif command == "m":
                client_id = _atoi(line[2:])
                if server.get_client(client_id) is not None:
                    try:
                        server.send(client_id, "[SERVER] Size özel mesaj!".encode())
                    except GameNetError:
                        continue
                    print(f"{client_id} numaralı istemciye özel mesaj gönderildi.")
            elif command == "q":
                break
    finally:
        server.stop_async()
    return 0


def _cmd_client(args: argparse.Namespace) -> int:
    def on_receive(data: bytes) -> None:
        print(f"[CLIENT] Veri alındı: {_text(data)}")
        if len(data) > 10 and data.startswith(b"[SERVER]"):
            print("[CLIENT] Sunucudan özel mesaj geldi!")

    try:
        client = TcpClient(args.host, args.port, on_receive)
    except GameNetError:
        print("Bağlanılamadı!")
        return 1
    print("Sunucuya bağlanıldı.")
    try:
        client.send("Merhaba Sunucu! Ben özel bir mesajım.".encode())
        client.start_async()
        _wait_for_enter()
    finally:
        client.stop_async()
    return 0


def _cmd_udp_server(args: argparse.Namespace) -> int:
    def on_receive(address, data: bytes, user_data: UdpServer) -> None:
        ip, port = address
        print(f"[UDP SERVER] {ip}:{port} -> {_text(data)}")
        try:
            user_data.sendto(address, f"[UDP SERVER] Merhaba {ip}:{port}!".encode())
        except GameNetError:
            pass

    try:
        server = UdpServer(args.port, on_receive, host=args.host)
    except GameNetError:
        print("UDP sunucu başlatılamadı!")
        return 1
    server.set_autobufferassign(True)
    server.user_data = server
    print(f"UDP sunucu başlatıldı. Port: {server.address[1]}")
    server.start_async()
    try:
        _wait_for_enter()
    finally:
        server.stop_async()
    return 0


def _cmd_udp_client(args: argparse.Namespace) -> int:
    def on_receive(data: bytes) -> None:
        print(f"[UDP CLIENT] Sunucudan cevap: {_text(data)}")

    try:
        client = UdpClient(args.host, args.port)
    except GameNetError:
        print("UDP istemci başlatılamadı!")
        return 1
    print("UDP istemci başlatıldı.")
    try:
        client.send("Merhaba UDP Sunucu!".encode())
        client.start_async(on_receive)
        _wait_for_enter()
    finally:
        client.stop_async()
    return 0


def _cmd_relay(args: argparse.Namespace) -> int:
    relay = RelayServer()

    def on_connect(client: ClientHandle) -> None:
        try:
            relay.add_peer(RelayPeer(client.id, client.address, client.socket))
        except GameNetError:
            log("[RELAY] Peer %d reddedildi: tablo dolu.", client.id)
            server.kick(client)
            return
        log("[RELAY] Peer %d bağlandı.", client.id)

    def on_receive(client: ClientHandle, data: bytes) -> None:
        if len(data) < 4:
            return
        target_id, payload = unpack_relay_packet(data)
        log("[RELAY] Peer %d -> Peer %d (%d byte)", client.id, target_id, len(payload))
        try:
            relay.forward(target_id, payload)
        except GameNetError:
            pass

    def on_disconnect(client: ClientHandle) -> None:
        peer = relay.get_peer_by_id(client.id)
        if peer is not None and peer.socket is client.socket:
            peer.connected = False
        log("[RELAY] Peer %d ayrıldı.", client.id)

    try:
        server = TcpServer(args.port, on_receive, on_connect, on_disconnect, host=args.host)
    except GameNetError:
        log("Relay sunucu başlatılamadı!")
        return 1
    log("Relay sunucu başlatıldı. Port: %d", server.address[1])
    server.start_async()
    try:
        _wait_for_enter()
    finally:
        server.stop_async()
    return 0


def _on_reconnect(_policy: ReconnectPolicy, status: int) -> None:
    if status == RECONNECTING:
        print("[CLIENT] Yeniden bağlanılıyor...")
    elif status == RECONNECTED:
        print("[CLIENT] Yeniden bağlantı BAŞARILI!")
    elif status == RECONNECT_FAILED:
        print("[CLIENT] Yeniden bağlantı BAŞARISIZ!")


def _cmd_peer_relay(args: argparse.Namespace) -> int:
    address = (args.server_ip, args.server_port)
    try:
        sock = socket.create_connection(address, timeout=args.timeout)
    except OSError:
        print("Sunucuya bağlanılamadı!")
        return 1
    sock.settimeout(args.timeout)
    print(f"Sunucuya bağlanıldı. Peer id: {args.my_id}")

    policy = ReconnectPolicy()
    policy.configure(True, args.attempts, args.interval_ms)
    policy.set_callback(_on_reconnect)

    with sock:
        data = _recv(sock)
        if data:
            print(f"Peer listesi: {_text(data)}")
        message = f"Merhaba Peer {args.target_id}!"
        try:
            sock.sendall(pack_relay_packet(args.target_id, message.encode()))
        except OSError:
            pass
        print(f"Peer {args.target_id}'ye mesaj gönderildi: {message}")
        data = _recv(sock)
        if data:
            print(f"Peer'dan cevap: {_text(data)}")
        print("Bağlantı kopartılıyor (test için)...")

    try:
        restored = policy.reconnect(address)
    except GameNetError:
        return 0
    restored.close()
    return 0


def _cmd_p2p_udp_relay(args: argparse.Namespace) -> int:
    address = (args.server_ip, args.server_port)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(args.timeout)
        message = f"Merhaba UDP Peer {args.target_id}!"
        sock.sendto(pack_relay_packet(args.target_id, message.encode()), address)
        print(f"Peer {args.target_id}'ye UDP ile mesaj gönderildi: {message}")
        data = _recv(sock, udp=True)
        if data:
            print(f"Peer'dan UDP cevap: {_text(data)}")
    return 0


def _cmd_udp_peer_relay(args: argparse.Namespace) -> int:
    address = (args.server_ip, args.server_port)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(args.timeout)
        sock.sendto(PEERLIST_REQUEST, address)
        data = _recv(sock, udp=True)
        if data:
            print(f"Peer listesi: {_text(data)}")
        message = f"Merhaba UDP Peer {args.target_id}!"
        sock.sendto(pack_relay_packet(args.target_id, message.encode()), address)
        print(f"Peer {args.target_id}'ye UDP ile mesaj gönderildi: {message}")
        data = _recv(sock, udp=True)
        if data:
            print(f"Peer'dan UDP cevap: {_text(data)}")
    return 0


def _add_peer_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("server_ip")
    parser.add_argument("server_port", type=int)
    parser.add_argument("my_id", type=int)
    parser.add_argument("target_id", type=int)
    parser.add_argument("--timeout", type=float, default=None,
                        help="seconds to wait for each reply (default: forever)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gamenet", description="Game networking demos.")
    sub = parser.add_subparsers(dest="command", required=True)

    listeners: list[tuple[str, Callable[[argparse.Namespace], int], str]] = [
        ("server", _cmd_server, "interactive TCP server"),
        ("udp-server", _cmd_udp_server, "UDP server that greets each sender"),
        ("relay", _cmd_relay, "TCP relay forwarding packets between peers"),
    ]
    for name, handler, text in listeners:
        p = sub.add_parser(name, help=text)
        p.add_argument("--host", default="")
        p.add_argument("--port", type=int, default=DEFAULT_PORT)
        p.set_defaults(handler=handler)

    connectors: list[tuple[str, Callable[[argparse.Namespace], int], str]] = [
        ("client", _cmd_client, "TCP client that greets the server"),
        ("udp-client", _cmd_udp_client, "UDP client that greets the server"),
    ]
    for name, handler, text in connectors:
        p = sub.add_parser(name, help=text)
        p.add_argument("--host", default=DEFAULT_HOST)
        p.add_argument("--port", type=int, default=DEFAULT_PORT)
        p.set_defaults(handler=handler)

    p = sub.add_parser("peer-relay", help="TCP peer: peer list, relayed message, reconnect")
    _add_peer_arguments(p)
    p.add_argument("--attempts", type=int, default=5)
    p.add_argument("--interval-ms", type=int, default=2000)
    p.set_defaults(handler=_cmd_peer_relay)

    p = sub.add_parser("p2p-udp-relay", help="UDP peer sending through a relay")
    _add_peer_arguments(p)
    p.set_defaults(handler=_cmd_p2p_udp_relay)

    p = sub.add_parser("udp-peer-relay", help="UDP peer: peer list and relayed message")
    _add_peer_arguments(p)
    p.set_defaults(handler=_cmd_udp_peer_relay)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command named in *argv*; return the exit status."""
    args = _build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())