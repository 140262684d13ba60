"""Write path: insert one row into the remote row store.

Each insert is a single request/reply exchange on its own short-lived
connection, independent of any scan in progress:

    IDLE -> SENDING -> AWAITING_ACK -> DONE
              |             |
              +-------------+--------> FAILED

An insert is attempted exactly once. The connection is closed before
insert_row returns, whatever the outcome.

The protocol carries no request identifier. A caller that resends after
a transport failure may insert the row twice if the peer had already
received the first frame.
"""

from __future__ import annotations

import time
from enum import Enum

from remote_table.domain.entities import DataReply, Opcode, Reply, StatusReply
from remote_table.domain.errors import RejectedError, RemoteTableError
from remote_table.domain.services.wire_codec import decode_reply, encode_write
from remote_table.infrastructure.logging import get_logger
from remote_table.infrastructure.metrics import MetricsRegistry
from remote_table.infrastructure.tracing import trace_span
from remote_table.ports.outbound import ConnectionFactory

logger = get_logger(__name__)


class WriteState(Enum):
    """States of one insert attempt."""

    IDLE = "idle"
    SENDING = "sending"
    AWAITING_ACK = "awaiting_ack"
    DONE = "done"
    FAILED = "failed"


class RowWriter:
    """Sends single rows to the row store and waits for the acknowledgement.

    Attributes:
        record_length: Fixed size of every row this writer sends.
        state: State reached by the most recent insert.
    """

    def __init__(
        self,
        connections: ConnectionFactory,
        record_length: int,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            connections: Factory for per-insert connections.
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
        self._state = WriteState.IDLE

    @property
    def record_length(self) -> int:
        return self._record_length

    @property
    def state(self) -> WriteState:
        return self._state

    def insert_row(self, row: bytes) -> None:
        """Insert one row.

        Args:
            row: Exactly record_length bytes.

        Raises:
            ValueError: If the row has the wrong size (nothing is sent).
            ConnectError: If the row store cannot be reached.
            TransportError: If the exchange fails or the reply is cut short.
            ProtocolError: If the reply cannot be decoded.
            RejectedError: If the peer answers anything but "success".
        """
        self._state = WriteState.IDLE
        frame = encode_write(row, self._record_length)
        started = time.perf_counter()

        with trace_span(
            "remote_table.insert",
            {
                "row_store.endpoint": str(self._connections.endpoint),
                "row_store.record_length": self._record_length,
            },
        ):
            try:
                reply = self._exchange(frame)
            except RemoteTableError as exc:
                self._state = WriteState.FAILED
                self._record_outcome("error", started)
                logger.warning(
                    "insert_failed",
                    endpoint=str(self._connections.endpoint),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise

            if isinstance(reply, StatusReply) and reply.is_success:
                self._state = WriteState.DONE
                self._record_outcome("success", started)
                logger.debug("insert_acknowledged", record_length=self._record_length)
                return

            self._state = WriteState.FAILED
            self._record_outcome("rejected", started)
            token = reply.token if isinstance(reply, StatusReply) else None
            logger.warning(
                "insert_rejected",
                endpoint=str(self._connections.endpoint),
                token=token,
                data_reply=isinstance(reply, DataReply),
            )
            raise RejectedError(token)

    def _exchange(self, frame: bytes) -> Reply:
        with self._connections.connection() as connection:
            self._state = WriteState.SENDING
            connection.send(frame)
            self._state = WriteState.AWAITING_ACK
            return decode_reply(connection, self._record_length)

    def _record_outcome(self, status: str, started: float) -> None:
        if self._metrics is None:
            return
        self._metrics.inserts_total.labels(status=status).inc()
        self._metrics.request_latency_seconds.labels(opcode=Opcode.WRITE.name.lower()).observe(
            time.perf_counter() - started
        )
