# gamenet

A small, dependency-free networking toolkit for games, built on the
standard library's sockets and threads.

## Modules

- `gamenet.tcp` – `TcpServer`, a select-driven server with 128 numbered
  client slots, and `TcpClient`. Both can run their receive loop on a
  background thread (`start_async` / `stop_async`) and both work as
  context managers.
- `gamenet.udp` – `UdpServer` and `UdpClient` with threaded receive loops.
- `gamenet.relay` – `RelayServer`, a table of up to 32 `RelayPeer`s that
  forwards data to a peer by id over its TCP socket (`forward`), to its
  address over a UDP socket (`forward_udp`), or to every peer but one
  (`broadcast`).
- `gamenet.peerlist` – the `PEERLIST:` message (`format_peer_list`), the
  `[4-byte little-endian target id][payload]` relay packet
  (`pack_relay_packet`, `unpack_relay_packet`) and `UdpPeerRegistry`, which
  gives ids to UDP senders by address and routes their packets.
- `gamenet.health` – `PingPong` latency tracking and `ReconnectPolicy`
  for reconnecting a dropped TCP connection.
- `gamenet.events` – `EventQueue`, a bounded thread-safe FIFO that raises
  `EventQueueFull` and `EventQueueEmpty`.
- `gamenet.json_mini` – `set_str`, `set_int`, `get_str`, `get_int` for flat
  JSON objects of string and integer fields.
- `gamenet.auth` – `set_server_token`, `set_client_token`, `server_token`,
  `client_token`: shared tokens, cut to 63 characters.
- `gamenet.errors` – `ErrorCode`, `GameNetError` and `strerror`.
- `gamenet.log` – `log(fmt, *args)`, printf-style, written to standard
  error unless `set_log_callback` installs a callback.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Using the library

A TCP server that answers each message. Callbacks receive a `ClientHandle`
(with `id`, `socket`, `address`, `last_active` and `user_data`); the
keep-alive message `b"GNS_KEEPALIVE"` is consumed and never passed on.

```python
from gamenet.tcp import TcpServer

def on_receive(client, data):
    server.send(client, b"got " + data)

def on_connect(client):
    print("connected", client.id, client.address)

def on_disconnect(client):
    print("gone", client.id)

server = TcpServer(12345, on_receive, on_connect, on_disconnect, host="0.0.0.0")
server.set_autobufferassign(True)
server.start_async()
...
print(server.client_count())
server.broadcast(b"[SERVER] hello everyone")
server.stop_async()
```

`send` raises `GameNetError` for an unknown client id or a failed send;
`kick` ignores unknown ids; `broadcast` returns how many clients got the
whole message.

A client:

```python
from gamenet.tcp import TcpClient

with TcpClient("127.0.0.1", 12345, lambda data: print(data)) as client:
    client.send(b"hello server")
    client.start_async()
    ...
```

UDP:

```python
from gamenet.udp import UdpServer, UdpClient

def on_datagram(address, data, user_data):
    user_data.sendto(address, b"hello")

server = UdpServer(12345, on_datagram)
server.user_data = server
server.start_async()

client = UdpClient("127.0.0.1", 12345)
client.send(b"hi")
client.start_async(print)
```

Relay packets and peer lists:

```python
from gamenet.peerlist import UdpPeerRegistry, format_peer_list, pack_relay_packet, unpack_relay_packet

packet = pack_relay_packet(7, b"hello peer 7")
target, payload = unpack_relay_packet(packet)
print(format_peer_list([1, 2, 3]))   # b"PEERLIST:1,2,3,"

registry = UdpPeerRegistry()
replies = registry.handle(("10.0.0.1", 4000), b"PEERLIST")
```

Errors are reported with exceptions; `GameNetError` carries an
`ErrorCode`, and `strerror` turns a code into a readable message.

## Command line

The `gamenet` command runs demo servers and clients:

```
gamenet --help
```

- `gamenet server [--host H] [--port P]` – interactive TCP server; reads the
  commands `c` (client count), `b` (broadcast), `k <id>` (kick),
  `m <id>` (private message) and `q` (quit) from standard input.
- `gamenet udp-server [--host H] [--port P]` – greets each UDP sender.
- `gamenet relay [--host H] [--port P]` – TCP relay that forwards
  `[target id][payload]` packets between connected clients.
- `gamenet client [--host H] [--port P]` and `gamenet udp-client ...` –
  send a greeting and print replies until Enter is pressed.
- `gamenet peer-relay SERVER_IP SERVER_PORT MY_ID TARGET_ID
  [--timeout S] [--attempts N] [--interval-ms MS]` – reads a peer list,
  sends a relayed message, waits for a reply, then disconnects and tries
  to reconnect.
- `gamenet p2p-udp-relay ...` and `gamenet udp-peer-relay ...` (same
  positional arguments and `--timeout`) – the UDP counterparts; the latter
  asks for the peer list first.

Servers listen on port 12345 on all interfaces by default; clients
connect to 127.0.0.1:12345.

## What it does not do

- There is no direct peer-to-peer networking: peers talk only through a
  server or relay.
- `RelayServer` does not listen on a socket itself; it is a peer table
  that an application (such as the `relay` command, built on `TcpServer`)
  fills and drives.
- No UDP command serves peer lists over the network; `UdpPeerRegistry`
  computes the replies, and sending them is left to the caller.
- The tokens in `gamenet.auth` are only stored; no handshake checks them.
- `PingPong.tick` must be called by the application; nothing pings on a timer.