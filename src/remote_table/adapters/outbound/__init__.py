"""Outbound adapters - concrete implementations of outbound ports."""

from remote_table.adapters.outbound.tcp_connection import TcpConnection, TcpConnectionManager

__all__ = [
    "TcpConnection",
    "TcpConnectionManager",
]
