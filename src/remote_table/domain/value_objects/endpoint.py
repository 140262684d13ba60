"""Endpoint of the remote row store.

The endpoint is fixed for the lifetime of the process. It is built from
configuration once and handed to the connection manager at construction;
nothing else holds address state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Address of the remote row store plus its I/O bounds.

    Attributes:
        host: Hostname or IP address of the row store.
        port: TCP port of the row store.
        connect_timeout: Seconds allowed for establishing a connection.
        read_timeout: Seconds allowed for each socket read or write.

    Example:
        >>> Endpoint("10.0.5.101", 8188)
        Endpoint(10.0.5.101:8188)
    """

    host: str
    port: int
    connect_timeout: float = 5.0
    read_timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate the endpoint."""
        if not self.host:
            raise ValueError("host must not be empty")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.connect_timeout <= 0:
            raise ValueError(f"connect_timeout must be positive, got {self.connect_timeout}")
        if self.read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {self.read_timeout}")

    @property
    def address(self) -> tuple[str, int]:
        """Return the (host, port) pair accepted by the socket module."""
        return (self.host, self.port)

    def __repr__(self) -> str:
        return f"Endpoint({self.host}:{self.port})"

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
