"""Row store transport port.

This outbound port defines the contract the write and scan paths rely on
to reach the remote row store. Implementations may use plain TCP sockets
or in-memory fakes; the protocol logic never sees the difference.

The transport is responsible for:
- Opening one exclusively owned connection per operation
- Moving raw bytes in both directions with bounded timeouts
- Releasing the connection on every exit path
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Protocol

from remote_table.domain.value_objects import Endpoint


class RowStoreConnection(Protocol):
    """Protocol for one bidirectional byte stream to the row store.

    A connection is owned by exactly one operation. Once it has failed it
    must not be reused; the owner closes it and opens a new one if it
    wants to try again.

    Thread Safety:
        None. A connection is never shared between callers.
    """

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Return True once close() has been called."""
        ...

    @property
    @abstractmethod
    def is_failed(self) -> bool:
        """Return True once any send or receive has failed."""
        ...

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send all of data.

        Raises:
            TransportError: If the connection is closed, failed, or the
                send fails or times out.
        """
        ...

    @abstractmethod
    def recv(self, max_bytes: int) -> bytes:
        """Receive up to max_bytes bytes.

        Returns:
            The bytes received; b"" when the peer closed the stream.

        Raises:
            TransportError: If the connection is closed, failed, or the
                receive fails or times out.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Safe to call any number of times."""
        ...


class ConnectionFactory(Protocol):
    """Protocol for acquiring and releasing row store connections.

    Thread Safety:
        Implementations must allow many independent connections to the
        same endpoint to be open at once from different threads.
    """

    @property
    @abstractmethod
    def endpoint(self) -> Endpoint:
        """Return the endpoint connections are opened against."""
        ...

    @abstractmethod
    def open(self) -> RowStoreConnection:
        """Open a new connection to the endpoint.

        Raises:
            ConnectError: On refusal, timeout, or resolution failure.
        """
        ...

    @abstractmethod
    def close(self, connection: RowStoreConnection) -> None:
        """Close a connection opened by this factory. Idempotent."""
        ...

    @abstractmethod
    def connection(self) -> AbstractContextManager[RowStoreConnection]:
        """Open a connection scoped to a with-block.

        The connection is closed when the block exits, however it exits.
        """
        ...
