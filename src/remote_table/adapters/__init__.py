"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (the row store socket)
"""

from remote_table.adapters.outbound import TcpConnection, TcpConnectionManager

__all__ = [
    # Outbound adapters
    "TcpConnection",
    "TcpConnectionManager",
]
