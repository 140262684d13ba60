"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (the row store transport)

Adapters implement these ports with concrete functionality.
"""

from remote_table.ports.outbound import ConnectionFactory, RowStoreConnection

__all__ = [
    # Outbound ports
    "ConnectionFactory",
    "RowStoreConnection",
]
