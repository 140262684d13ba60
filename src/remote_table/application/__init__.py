"""Application layer for the remote table handler.

The application layer adapts host storage-engine calls onto the domain's
write and scan paths.

Exports:
    - Handlerton: Plugin entry point and handler factory
    - RemoteTableHandler: Lifecycle shim for one table handle
    - TableShare, TableShareRegistry: Per-table shared state
"""

from remote_table.application.handler import RemoteTableHandler
from remote_table.application.handlerton import Handlerton
from remote_table.application.table_share import TableShare, TableShareRegistry

__all__ = [
    "Handlerton",
    "RemoteTableHandler",
    "TableShare",
    "TableShareRegistry",
]
