"""Per-table state shared by every handler open on the same table.

The host may open several handler instances for one table at once. They
all agree on the table's record length, which is fixed when the first
handler opens the table and dropped when the last one closes it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass
class TableShare:
    """Shared state of one open table."""

    table_name: str
    record_length: int
    open_count: int = 0


class TableShareRegistry:
    """Reference-counted registry of open tables.

    Thread Safety:
        All methods are thread-safe.
    """

    def __init__(self) -> None:
        self._shares: dict[str, TableShare] = {}
        self._lock = threading.Lock()

    def acquire(self, table_name: str, record_length: int) -> TableShare:
        """Get or create the share for table_name and take a reference.

        Raises:
            ValueError: If record_length is not positive, or differs from
                the record length the table was first opened with.
        """
        if record_length <= 0:
            raise ValueError(f"record_length must be positive, got {record_length}")

        with self._lock:
            share = self._shares.get(table_name)
            if share is None:
                share = TableShare(table_name=table_name, record_length=record_length)
                self._shares[table_name] = share
            elif share.record_length != record_length:
                raise ValueError(
                    f"Record length mismatch for {table_name!r}: "
                    f"share has {share.record_length}, got {record_length}"
                )
            share.open_count += 1
            return share

    def release(self, table_name: str) -> None:
        """Drop one reference; the share is forgotten when none remain."""
        with self._lock:
            share = self._shares.get(table_name)
            if share is None:
                return
            share.open_count -= 1
            if share.open_count <= 0:
                del self._shares[table_name]

    def get(self, table_name: str) -> TableShare | None:
        with self._lock:
            return self._shares.get(table_name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._shares)

    def __contains__(self, table_name: object) -> bool:
        with self._lock:
            return table_name in self._shares
