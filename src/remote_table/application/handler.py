"""Lifecycle shim between the host engine and the row store protocol.

The host drives one RemoteTableHandler per table handle. A full table
scan arrives as:

    open(record_length)
    rnd_init()
    rnd_next(buf)  -> SUCCESS, SUCCESS, ..., END_OF_FILE
    rnd_end()
    close()

and an insert as a single write_row(buf). Every other storage-engine hook
is answered with WRONG_COMMAND without touching the network.

Protocol errors never escape to the host: they are logged and reported as
GENERIC_FAILURE, the only failure code the host understands from us.
"""

from __future__ import annotations

from typing import Any

from remote_table.application.table_share import TableShare, TableShareRegistry
from remote_table.domain.errors import RemoteTableError
from remote_table.domain.services import RowWriter, ScanHandle, TableScanner
from remote_table.domain.value_objects import HandlerResult
from remote_table.infrastructure.logging import get_logger
from remote_table.infrastructure.metrics import MetricsRegistry
from remote_table.ports.outbound import ConnectionFactory

logger = get_logger(__name__)


class RemoteTableHandler:
    """Host-facing handler for one table handle.

    Thread Safety:
        None. The host uses each handler from one thread at a time.
    """

    def __init__(
        self,
        table_name: str,
        connections: ConnectionFactory,
        shares: TableShareRegistry,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            table_name: Name of the table this handle belongs to.
            connections: Transport to the row store.
            shares: Registry of per-table shared state.
            metrics: Optional metrics registry.
        """
        self._table_name = table_name
        self._connections = connections
        self._shares = shares
        self._metrics = metrics
        self._log = logger.bind(table=table_name)

        self._share: TableShare | None = None
        self._writer: RowWriter | None = None
        self._scanner: TableScanner | None = None
        self._scan: ScanHandle | None = None

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def is_open(self) -> bool:
        return self._share is not None

    @property
    def record_length(self) -> int | None:
        return self._share.record_length if self._share is not None else None

    @property
    def active_scan(self) -> ScanHandle | None:
        return self._scan

    # Table lifecycle

    def open(self, record_length: int) -> HandlerResult:
        """Open the table. No protocol action.

        Args:
            record_length: Fixed record length of the table, in bytes.
        """
        if self._share is not None:
            if record_length != self._share.record_length:
                self._log.warning(
                    "table_reopen_mismatch",
                    record_length=record_length,
                    share_record_length=self._share.record_length,
                )
                return HandlerResult.GENERIC_FAILURE
            return HandlerResult.SUCCESS

        try:
            share = self._shares.acquire(self._table_name, record_length)
        except ValueError as exc:
            self._log.warning("table_open_failed", error=str(exc))
            return HandlerResult.GENERIC_FAILURE

        self._share = share
        self._writer = RowWriter(self._connections, share.record_length, self._metrics)
        self._scanner = TableScanner(self._connections, share.record_length, self._metrics)
        self._log.debug("table_opened", record_length=share.record_length)
        return HandlerResult.SUCCESS

    def close(self) -> HandlerResult:
        """Close the table, ending any scan still in progress."""
        self._end_active_scan()

        if self._share is not None:
            self._shares.release(self._table_name)
            self._share = None
            self._writer = None
            self._scanner = None
            self._log.debug("table_closed")

        return HandlerResult.SUCCESS

    # Write path

    def write_row(self, row: bytes | bytearray | memoryview) -> HandlerResult:
        """Insert one row.

        The first record_length bytes of row are sent; a shorter buffer
        is refused without contacting the row store.
        """
        if self._writer is None:
            self._log.warning("write_row_on_closed_table")
            return HandlerResult.GENERIC_FAILURE

        record_length = self._writer.record_length
        if len(row) < record_length:
            self._log.warning(
                "write_row_short_buffer", size=len(row), record_length=record_length
            )
            return HandlerResult.GENERIC_FAILURE

        try:
            self._writer.insert_row(bytes(row[:record_length]))
        except RemoteTableError as exc:
            self._log.warning("write_row_failed", error=str(exc))
            return HandlerResult.GENERIC_FAILURE

        return HandlerResult.SUCCESS

    # Scan path

    def rnd_init(self, scan: bool = True) -> HandlerResult:
        """Begin a full table scan, replacing any scan still active."""
        if self._scanner is None:
            self._log.warning("rnd_init_on_closed_table")
            return HandlerResult.GENERIC_FAILURE

        self._end_active_scan()

        try:
            self._scan = self._scanner.begin_scan()
        except RemoteTableError as exc:
            self._log.warning("rnd_init_failed", error=str(exc))
            return HandlerResult.GENERIC_FAILURE

        return HandlerResult.SUCCESS

    def rnd_next(self, buf: bytearray | memoryview) -> HandlerResult:
        """Fetch the next row of the scan into buf.

        Returns:
            SUCCESS with the row copied into buf, END_OF_FILE when the
            table has no more rows, or GENERIC_FAILURE.
        """
        if self._scan is None or self._scanner is None:
            self._log.warning("rnd_next_without_scan")
            return HandlerResult.GENERIC_FAILURE

        record_length = self._scanner.record_length
        if len(buf) < record_length:
            self._log.warning(
                "rnd_next_short_buffer", size=len(buf), record_length=record_length
            )
            return HandlerResult.GENERIC_FAILURE

        try:
            row = self._scanner.next_row(self._scan)
        except RemoteTableError as exc:
            self._log.warning("rnd_next_failed", error=str(exc))
            self._end_active_scan()
            return HandlerResult.GENERIC_FAILURE

        if row is None:
            return HandlerResult.END_OF_FILE

        buf[:record_length] = row
        return HandlerResult.SUCCESS

    def rnd_end(self) -> HandlerResult:
        """End the scan. Always succeeds."""
        self._end_active_scan()
        return HandlerResult.SUCCESS

    def _end_active_scan(self) -> None:
        scan, self._scan = self._scan, None
        if scan is not None and self._scanner is not None:
            self._scanner.end_scan(scan)

    # Predicate pushdown

    def cond_push(self, cond: Any, other_tables_ok: bool = False) -> Any:
        """Accept a pushed-down condition for diagnostics only.

        The condition is logged and handed back unchanged, so the host
        keeps evaluating it on every row.
        """
        if cond is not None:
            self._log.debug("cond_push", condition=repr(cond), other_tables_ok=other_tables_ok)
        return cond

    # Unsupported operations

    def _unsupported(self, operation: str) -> HandlerResult:
        self._log.debug("unsupported_operation", operation=operation)
        return HandlerResult.WRONG_COMMAND

    def position(self, record: bytes) -> HandlerResult:
        return self._unsupported("position")

    def rnd_pos(self, buf: bytearray, pos: bytes) -> HandlerResult:
        return self._unsupported("rnd_pos")

    def index_read_map(self, buf: bytearray, key: bytes, keypart_map: int, find_flag: int) -> HandlerResult:
        return self._unsupported("index_read_map")

    def index_next(self, buf: bytearray) -> HandlerResult:
        return self._unsupported("index_next")

    def index_prev(self, buf: bytearray) -> HandlerResult:
        return self._unsupported("index_prev")

    def index_first(self, buf: bytearray) -> HandlerResult:
        return self._unsupported("index_first")

    def index_last(self, buf: bytearray) -> HandlerResult:
        return self._unsupported("index_last")

    def update_row(self, old_row: bytes, new_row: bytes) -> HandlerResult:
        return self._unsupported("update_row")

    def delete_row(self, row: bytes) -> HandlerResult:
        return self._unsupported("delete_row")

    def delete_all_rows(self) -> HandlerResult:
        return self._unsupported("delete_all_rows")

    def create(self, name: str) -> HandlerResult:
        return self._unsupported("create")

    def rename_table(self, old_name: str, new_name: str) -> HandlerResult:
        return self._unsupported("rename_table")

    def records_in_range(self, index: int, min_key: bytes | None, max_key: bytes | None) -> HandlerResult:
        return self._unsupported("records_in_range")

    def __enter__(self) -> RemoteTableHandler:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RemoteTableHandler({self._table_name!r}, open={self.is_open})"
