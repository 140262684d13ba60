"""Error taxonomy for the row store protocol.

    RemoteTableError
    ├── ConnectError          refused, timed out, or unresolvable endpoint
    ├── TransportError        send/recv failure or timeout mid-stream
    │   └── ShortReadError    stream closed before the framed byte count
    ├── ProtocolError         unexpected reply for the request
    │   └── MalformedFrameError
    ├── RejectedError         peer declined a write
    └── ScanStateError        scan step on a handle that is not open

None of these are retried by the write or scan paths; they propagate to
the lifecycle shim, which maps them onto the host's failure code.
"""

from __future__ import annotations


class RemoteTableError(Exception):
    """Base class for all row store protocol errors."""


class ConnectError(RemoteTableError):
    """Raised when a connection to the endpoint cannot be established."""


class TransportError(RemoteTableError):
    """Raised when an established connection fails to send or receive."""


class ShortReadError(TransportError):
    """Raised when the stream closes before a frame is fully read."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Short read: got {received} bytes, expected {expected}")
        self.expected = expected
        self.received = received


class ProtocolError(RemoteTableError):
    """Raised when the peer sends a reply that does not fit the request."""


class MalformedFrameError(ProtocolError):
    """Raised when a reply frame cannot be decoded."""


class RejectedError(RemoteTableError):
    """Raised when the peer declines a write.

    token is the status token the peer answered with, or None when it
    answered with a data reply instead of a status.
    """

    def __init__(self, token: str | None) -> None:
        if token is None:
            super().__init__("Row store answered a write with a data reply")
        else:
            super().__init__(f"Row store rejected write: {token!r}")
        self.token = token


class ScanStateError(RemoteTableError):
    """Raised when a scan is stepped after it was exhausted, failed, or ended."""
