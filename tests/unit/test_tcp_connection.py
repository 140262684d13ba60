"""Unit tests for the TCP transport."""

from __future__ import annotations

import socket
from typing import Generator

import pytest

from remote_table.adapters.outbound import TcpConnection, TcpConnectionManager
from remote_table.domain.errors import ConnectError, TransportError
from remote_table.domain.value_objects import Endpoint
from remote_table.infrastructure.metrics import MetricsRegistry

ENDPOINT = Endpoint("127.0.0.1", 8188, connect_timeout=1.0, read_timeout=1.0)


@pytest.fixture
def socket_pair() -> Generator[tuple[socket.socket, socket.socket], None, None]:
    """Provide a connected socket pair; the first end is wrapped under test."""
    ours, theirs = socket.socketpair()
    ours.settimeout(1.0)
    yield ours, theirs
    ours.close()
    theirs.close()


@pytest.mark.unit
class TestTcpConnection:
    """Tests for TcpConnection."""

    def test_send_and_recv(self, socket_pair) -> None:
        ours, theirs = socket_pair
        connection = TcpConnection(ours, ENDPOINT)

        connection.send(b"r")
        assert theirs.recv(1) == b"r"

        theirs.sendall(b"\x00\x03eof")
        assert connection.recv(16) == b"\x00\x03eof"

    def test_recv_after_peer_close(self, socket_pair) -> None:
        ours, theirs = socket_pair
        connection = TcpConnection(ours, ENDPOINT)

        theirs.close()

        assert connection.recv(16) == b""

    def test_recv_timeout_marks_failed(self, socket_pair) -> None:
        ours, _ = socket_pair
        ours.settimeout(0.05)
        connection = TcpConnection(ours, ENDPOINT)

        with pytest.raises(TransportError, match="Receive from"):
            connection.recv(1)

        assert connection.is_failed
        with pytest.raises(TransportError, match="has failed"):
            connection.send(b"r")

    def test_closed_connection_refuses_io(self, socket_pair) -> None:
        ours, _ = socket_pair
        connection = TcpConnection(ours, ENDPOINT)

        connection.close()

        assert connection.is_closed
        with pytest.raises(TransportError, match="is closed"):
            connection.send(b"r")
        with pytest.raises(TransportError, match="is closed"):
            connection.recv(1)

    def test_close_idempotent(self, socket_pair, metrics_registry: MetricsRegistry) -> None:
        ours, _ = socket_pair
        metrics_registry.connections_open.inc()
        connection = TcpConnection(ours, ENDPOINT, metrics_registry)

        connection.close()
        connection.close()

        assert metrics_registry.registry.get_sample_value("remote_table_connections_open") == 0.0

    def test_context_manager(self, socket_pair) -> None:
        ours, _ = socket_pair
        with TcpConnection(ours, ENDPOINT) as connection:
            assert not connection.is_closed
        assert connection.is_closed


@pytest.mark.unit
class TestTcpConnectionManager:
    """Tests for TcpConnectionManager."""

    def test_connect_refused(self, unused_tcp_port: int, metrics_registry: MetricsRegistry) -> None:
        """Nothing listening on the port is a connect error."""
        endpoint = Endpoint("127.0.0.1", unused_tcp_port, connect_timeout=1.0)
        manager = TcpConnectionManager(endpoint, metrics_registry)

        with pytest.raises(ConnectError, match=f"127.0.0.1:{unused_tcp_port}"):
            manager.open()

        registry = metrics_registry.registry
        assert registry.get_sample_value("remote_table_connect_failures_total") == 1.0
        assert registry.get_sample_value("remote_table_connections_opened_total") == 0.0

    def test_connect_timeout(
        self, monkeypatch: pytest.MonkeyPatch, metrics_registry: MetricsRegistry
    ) -> None:
        """A connect timeout surfaces as ConnectError."""
        calls = []

        def timing_out(address, timeout=None):
            calls.append((address, timeout))
            raise socket.timeout("timed out")

        monkeypatch.setattr(socket, "create_connection", timing_out)
        endpoint = Endpoint("10.255.255.1", 8188, connect_timeout=0.5)
        manager = TcpConnectionManager(endpoint, metrics_registry)

        with pytest.raises(ConnectError, match="timed out") as exc_info:
            manager.open()

        assert isinstance(exc_info.value.__cause__, socket.timeout)
        assert calls == [(("10.255.255.1", 8188), 0.5)]
        registry = metrics_registry.registry
        assert registry.get_sample_value("remote_table_connect_failures_total") == 1.0
        assert registry.get_sample_value("remote_table_connections_open") == 0.0

    def test_open_and_close(self, metrics_registry: MetricsRegistry) -> None:
        with socket.create_server(("127.0.0.1", 0)) as listener:
            port = listener.getsockname()[1]
            manager = TcpConnectionManager(
                Endpoint("127.0.0.1", port, read_timeout=2.0), metrics_registry
            )

            connection = manager.open()
            registry = metrics_registry.registry
            assert registry.get_sample_value("remote_table_connections_open") == 1.0
            assert connection.endpoint == manager.endpoint

            manager.close(connection)
            manager.close(connection)

            assert connection.is_closed
            assert registry.get_sample_value("remote_table_connections_open") == 0.0
            assert registry.get_sample_value("remote_table_connections_opened_total") == 1.0

    def test_connection_context_closes_on_error(self) -> None:
        with socket.create_server(("127.0.0.1", 0)) as listener:
            manager = TcpConnectionManager(Endpoint("127.0.0.1", listener.getsockname()[1]))

            with pytest.raises(RuntimeError):
                with manager.connection() as connection:
                    raise RuntimeError("boom")

            assert connection.is_closed

    def test_each_open_is_a_new_connection(self) -> None:
        with socket.create_server(("127.0.0.1", 0)) as listener:
            manager = TcpConnectionManager(Endpoint("127.0.0.1", listener.getsockname()[1]))

            with manager.connection() as first, manager.connection() as second:
                assert first is not second
