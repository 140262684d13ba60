"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the systems the handler depends on,
namely the byte transport to the remote row store.
"""

from remote_table.ports.outbound.row_store_connection import (
    ConnectionFactory,
    RowStoreConnection,
)

__all__ = [
    "ConnectionFactory",
    "RowStoreConnection",
]
