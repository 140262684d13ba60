"""Test doubles and a scripted row store peer shared by the test suite."""

from __future__ import annotations

import socket
import socketserver
import threading
from contextlib import contextmanager
from typing import Iterator

from remote_table.domain.entities import Opcode, StatusToken
from remote_table.domain.errors import ConnectError, ShortReadError, TransportError
from remote_table.domain.services import (
    decode_request,
    encode_data_reply,
    encode_status_reply,
)
from remote_table.domain.value_objects import Endpoint


RECORD_LENGTH = 8


class FakeConnection:
    """In-memory connection that replays scripted reply bytes."""

    def __init__(self, incoming: bytes = b"", chunk_size: int | None = None) -> None:
        self._incoming = bytearray(incoming)
        self._chunk_size = chunk_size
        self.sent = bytearray()
        self.close_calls = 0
        self.fail_on_send = False
        self.fail_on_recv = False
        self._closed = False
        self._failed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_failed(self) -> bool:
        return self._failed

    def send(self, data: bytes) -> None:
        if self._closed or self._failed:
            raise TransportError("connection unusable")
        if self.fail_on_send:
            self._failed = True
            raise TransportError("send failed")
        self.sent += data

    def recv(self, max_bytes: int) -> bytes:
        if self._closed or self._failed:
            raise TransportError("connection unusable")
        if self.fail_on_recv:
            self._failed = True
            raise TransportError("recv timed out")
        size = max_bytes if self._chunk_size is None else min(max_bytes, self._chunk_size)
        chunk = bytes(self._incoming[:size])
        del self._incoming[:size]
        return chunk

    def close(self) -> None:
        self.close_calls += 1
        self._closed = True


class FakeConnectionFactory:
    """Hands out FakeConnections in order; records what was opened."""

    def __init__(
        self,
        *connections: FakeConnection,
        connect_error: bool = False,
    ) -> None:
        self._pending = list(connections)
        self.opened: list[FakeConnection] = []
        self.connect_error = connect_error
        self._endpoint = Endpoint("row-store.test", 8188)

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    def open(self) -> FakeConnection:
        if self.connect_error:
            raise ConnectError(f"Cannot connect to {self._endpoint}: timed out")
        connection = self._pending.pop(0) if self._pending else FakeConnection()
        self.opened.append(connection)
        return connection

    def close(self, connection: FakeConnection) -> None:
        connection.close()

    @contextmanager
    def connection(self) -> Iterator[FakeConnection]:
        connection = self.open()
        try:
            yield connection
        finally:
            self.close(connection)


def make_row(seed: int, record_length: int = RECORD_LENGTH) -> bytes:
    """Build a deterministic row of record_length bytes."""
    return bytes((seed + i) % 256 for i in range(record_length))


def scan_script(rows: list[bytes], final_token: str = StatusToken.EOF.value) -> bytes:
    """Reply bytes for a scan returning rows, then a status token."""
    return b"".join(encode_data_reply(row) for row in rows) + encode_status_reply(final_token)


class RowStorePeer:
    """A minimal in-memory row store served over real TCP sockets.

    Writes are appended to a list and acknowledged with write_token;
    every scan walks a snapshot of the list and finishes with "eof".
    """

    def __init__(self, record_length: int = RECORD_LENGTH) -> None:
        self.record_length = record_length
        self.rows: list[bytes] = []
        self.write_token = StatusToken.SUCCESS.value
        self.connections_accepted = 0
        self.connections_finished = 0
        self._lock = threading.Lock()

        peer = self

        class _Handler(socketserver.BaseRequestHandler):
            def handle(self) -> None:
                with peer._lock:
                    peer.connections_accepted += 1
                    snapshot = list(peer.rows)
                cursor = iter(snapshot)
                stream = _SocketSource(self.request)
                try:
                    while True:
                        try:
                            opcode, row = decode_request(stream, peer.record_length)
                        except ShortReadError:
                            return
                        if opcode is Opcode.WRITE:
                            with peer._lock:
                                if peer.write_token == StatusToken.SUCCESS.value:
                                    peer.rows.append(row)
                                token = peer.write_token
                            self.request.sendall(encode_status_reply(token))
                        else:
                            nxt = next(cursor, None)
                            if nxt is None:
                                self.request.sendall(encode_status_reply(StatusToken.EOF.value))
                            else:
                                self.request.sendall(encode_data_reply(nxt))
                finally:
                    with peer._lock:
                        peer.connections_finished += 1

        self._server = socketserver.ThreadingTCPServer(("127.0.0.1", 0), _Handler)
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def endpoint(self) -> Endpoint:
        host, port = self._server.server_address[:2]
        return Endpoint(host, port, connect_timeout=2.0, read_timeout=2.0)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5)


class _SocketSource:
    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def recv(self, max_bytes: int) -> bytes:
        try:
            return self._sock.recv(max_bytes)
        except OSError:
            return b""


