"""TCP implementation of the row store transport.

This adapter implements the ConnectionFactory and RowStoreConnection
protocols with blocking sockets. Every connection is bounded by the
endpoint's connect timeout while connecting and by its read timeout on
every send and receive afterwards; a timeout is reported like any other
transport failure.

Thread Safety:
    The manager keeps no per-connection state, so any number of threads
    may open connections to the same endpoint at once. A connection
    itself must be used by a single caller.
"""

from __future__ import annotations

import socket
from contextlib import contextmanager
from typing import Iterator

from remote_table.domain.errors import ConnectError, TransportError
from remote_table.domain.value_objects import Endpoint
from remote_table.infrastructure.logging import get_logger
from remote_table.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)


class TcpConnection:
    """One TCP stream to the row store.

    A connection is marked failed by the first send or receive error and
    refuses all I/O afterwards.
    """

    def __init__(
        self,
        sock: socket.socket,
        endpoint: Endpoint,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._sock = sock
        self._endpoint = endpoint
        self._metrics = metrics
        self._closed = False
        self._failed = False

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_failed(self) -> bool:
        return self._failed

    def _check_usable(self) -> None:
        if self._closed:
            raise TransportError(f"Connection to {self._endpoint} is closed")
        if self._failed:
            raise TransportError(f"Connection to {self._endpoint} has failed")

    def send(self, data: bytes) -> None:
        """Send all of data.

        Raises:
            TransportError: If the connection is unusable or the send fails.
        """
        self._check_usable()
        try:
            self._sock.sendall(data)
        except OSError as exc:
            self._failed = True
            raise TransportError(f"Send to {self._endpoint} failed: {exc}") from exc

    def recv(self, max_bytes: int) -> bytes:
        """Receive up to max_bytes bytes; b"" means the peer closed.

        Raises:
            TransportError: If the connection is unusable or the receive fails.
        """
        self._check_usable()
        try:
            return self._sock.recv(max_bytes)
        except OSError as exc:
            self._failed = True
            raise TransportError(f"Receive from {self._endpoint} failed: {exc}") from exc

    def close(self) -> None:
        """Close the socket. Safe to call any number of times."""
        if self._closed:
            return

        self._closed = True
        try:
            self._sock.close()
        finally:
            if self._metrics is not None:
                self._metrics.connections_open.dec()
        logger.debug("connection_closed", endpoint=str(self._endpoint), failed=self._failed)

    def __enter__(self) -> TcpConnection:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "failed" if self._failed else "open"
        return f"TcpConnection({self._endpoint}, {state})"


class TcpConnectionManager:
    """Opens and releases TCP connections to a fixed endpoint.

    No pooling and no retries: every open() is a fresh connect attempt.

    Attributes:
        endpoint: The row store endpoint.
    """

    def __init__(self, endpoint: Endpoint, metrics: MetricsRegistry | None = None) -> None:
        """Initialize the manager.

        Args:
            endpoint: Immutable address and timeouts of the row store.
            metrics: Optional metrics registry.
        """
        self._endpoint = endpoint
        self._metrics = metrics

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    def open(self) -> TcpConnection:
        """Connect to the endpoint.

        Returns:
            An open connection with the read timeout applied.

        Raises:
            ConnectError: On refusal, timeout, or resolution failure.
        """
        try:
            sock = socket.create_connection(
                self._endpoint.address,
                timeout=self._endpoint.connect_timeout,
            )
        except OSError as exc:
            if self._metrics is not None:
                self._metrics.connect_failures_total.inc()
            logger.warning(
                "connect_failed",
                endpoint=str(self._endpoint),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise ConnectError(f"Cannot connect to {self._endpoint}: {exc}") from exc

        try:
            sock.settimeout(self._endpoint.read_timeout)
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except OSError as exc:
            sock.close()
            raise ConnectError(f"Cannot configure socket for {self._endpoint}: {exc}") from exc

        if self._metrics is not None:
            self._metrics.connections_opened_total.inc()
            self._metrics.connections_open.inc()
        logger.debug("connection_opened", endpoint=str(self._endpoint))

        return TcpConnection(sock, self._endpoint, self._metrics)

    def close(self, connection: TcpConnection) -> None:
        """Close a connection. Idempotent."""
        connection.close()

    @contextmanager
    def connection(self) -> Iterator[TcpConnection]:
        """Open a connection that is closed when the with-block exits."""
        connection = self.open()
        try:
            yield connection
        finally:
            self.close(connection)
