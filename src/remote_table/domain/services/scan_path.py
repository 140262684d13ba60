"""Scan path: stream every row of the remote table.

A scan owns one connection from begin_scan until end_scan. The cursor
lives on the row store and is identified only by that connection:

    CLOSED -> OPEN -> OPEN (row) ... -> EXHAUSTED
                 \\
                  +-> FAILED

EXHAUSTED and FAILED are terminal. A new scan needs a new begin_scan.
A failed scan has its connection closed at once; end_scan is still safe
to call on it, and on every other state, any number of times.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Iterator

from remote_table.domain.entities import DataReply, Opcode
from remote_table.domain.errors import ProtocolError, ScanStateError
from remote_table.domain.services.wire_codec import decode_reply, encode_next
from remote_table.infrastructure.logging import get_logger
from remote_table.infrastructure.metrics import MetricsRegistry
from remote_table.infrastructure.tracing import trace_span
from remote_table.ports.outbound import ConnectionFactory, RowStoreConnection

logger = get_logger(__name__)


class ScanState(Enum):
    """States of a table scan."""

    CLOSED = "closed"
    OPEN = "open"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class ScanHandle:
    """An in-progress scan and the connection that carries its cursor.

    Handles are created by TableScanner.begin_scan() and are usable as
    context managers:

        with scanner.begin_scan() as scan:
            for row in scan.rows():
                ...
    """

    def __init__(self, scanner: TableScanner, connection: RowStoreConnection) -> None:
        self._scanner = scanner
        self._connection: RowStoreConnection | None = connection
        self._state = ScanState.OPEN
        self._rows_returned = 0

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def rows_returned(self) -> int:
        return self._rows_returned

    @property
    def connection(self) -> RowStoreConnection | None:
        """The scan's connection, or None once it has been released."""
        return self._connection

    def next_row(self) -> bytes | None:
        """Shorthand for TableScanner.next_row(handle)."""
        return self._scanner.next_row(self)

    def rows(self) -> Iterator[bytes]:
        """Yield rows until the scan is exhausted."""
        while (row := self._scanner.next_row(self)) is not None:
            yield row

    def end(self) -> None:
        """Shorthand for TableScanner.end_scan(handle)."""
        self._scanner.end_scan(self)

    def _mark(self, state: ScanState) -> None:
        self._state = state

    def _count_row(self) -> None:
        self._rows_returned += 1

    def _take_connection(self) -> RowStoreConnection | None:
        connection, self._connection = self._connection, None
        return connection

    def __enter__(self) -> ScanHandle:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.end()

    def __repr__(self) -> str:
        return f"ScanHandle(state={self._state.value}, rows={self._rows_returned})"


class TableScanner:
    """Runs full-table scans against the row store.

    Thread Safety:
        A scanner may be shared; each handle must be driven by one caller.
        Handles share no mutable state with each other.
    """

    def __init__(
        self,
        connections: ConnectionFactory,
        record_length: int,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            connections: Factory for per-scan connections.
            record_length: Table record length in bytes.
            metrics: Optional metrics registry.

        Raises:
            ValueError: If record_length is not positive.
        """
        if record_length <= 0:
            raise ValueError(f"record_length must be positive, got {record_length}")

        self._connections = connections
        self._record_length = record_length
        self._metrics = metrics

    @property
    def record_length(self) -> int:
        return self._record_length

    def begin_scan(self) -> ScanHandle:
        """Open a scan.

        Returns:
            A handle in the OPEN state.

        Raises:
            ConnectError: If the row store cannot be reached.
        """
        with trace_span(
            "remote_table.scan.begin",
            {"row_store.endpoint": str(self._connections.endpoint)},
        ):
            connection = self._connections.open()

        logger.debug("scan_started", endpoint=str(self._connections.endpoint))
        return ScanHandle(self, connection)

    def next_row(self, handle: ScanHandle) -> bytes | None:
        """Advance the scan by one row.

        Returns:
            The next row (exactly record_length bytes), or None when the
            row store reports the end of the table.

        Raises:
            ScanStateError: If the handle is not OPEN. Nothing is sent.
            TransportError: If the exchange fails or the reply is cut short.
            ProtocolError: If the reply is malformed or an unexpected status.
        """
        if handle.state is not ScanState.OPEN or handle.connection is None:
            raise ScanStateError(f"Cannot advance a scan in state {handle.state.value!r}")

        connection = handle.connection
        started = time.perf_counter()

        with trace_span("remote_table.scan.next", {"scan.rows_returned": handle.rows_returned}):
            try:
                connection.send(encode_next())
                reply = decode_reply(connection, self._record_length)
            except BaseException as exc:
                # A partly read frame leaves the stream out of sync.
                self._fail(handle, exc)
                raise

        self._observe_latency(started)

        if isinstance(reply, DataReply):
            handle._count_row()
            if self._metrics is not None:
                self._metrics.rows_scanned_total.inc()
            return reply.row

        if reply.is_eof:
            handle._mark(ScanState.EXHAUSTED)
            self._count_scan("exhausted")
            logger.debug("scan_exhausted", rows=handle.rows_returned)
            return None

        exc = ProtocolError(f"Unexpected status during scan: {reply.token!r}")
        self._fail(handle, exc)
        raise exc

    def end_scan(self, handle: ScanHandle) -> None:
        """Release the scan's connection. Idempotent from every state."""
        if handle.state is ScanState.OPEN:
            self._count_scan("abandoned")
            logger.debug("scan_abandoned", rows=handle.rows_returned)

        self._release(handle)
        handle._mark(ScanState.CLOSED)

    def _fail(self, handle: ScanHandle, exc: BaseException) -> None:
        handle._mark(ScanState.FAILED)
        self._release(handle)
        self._count_scan("failed")
        logger.warning(
            "scan_failed",
            endpoint=str(self._connections.endpoint),
            rows=handle.rows_returned,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    def _release(self, handle: ScanHandle) -> None:
        connection = handle._take_connection()
        if connection is not None:
            self._connections.close(connection)

    def _count_scan(self, status: str) -> None:
        if self._metrics is not None:
            self._metrics.scans_total.labels(status=status).inc()

    def _observe_latency(self, started: float) -> None:
        if self._metrics is not None:
            self._metrics.request_latency_seconds.labels(
                opcode=Opcode.NEXT.name.lower()
            ).observe(time.perf_counter() - started)
