"""Domain services for the remote table handler.

Exports:
    Wire Codec:
        - encode_write, encode_next, decode_reply: client side framing
        - encode_status_reply, encode_data_reply, decode_request: peer side
        - read_exact: exact-count reads over any ByteSource
    Write Path:
        - RowWriter, WriteState
    Scan Path:
        - TableScanner, ScanHandle, ScanState
"""

from remote_table.domain.services.scan_path import ScanHandle, ScanState, TableScanner
from remote_table.domain.services.wire_codec import (
    ByteSource,
    decode_reply,
    decode_request,
    encode_data_reply,
    encode_next,
    encode_status_reply,
    encode_write,
    read_exact,
)
from remote_table.domain.services.write_path import RowWriter, WriteState

__all__ = [
    # Wire Codec
    "ByteSource",
    "decode_reply",
    "decode_request",
    "encode_data_reply",
    "encode_next",
    "encode_status_reply",
    "encode_write",
    "read_exact",
    # Write Path
    "RowWriter",
    "WriteState",
    # Scan Path
    "TableScanner",
    "ScanHandle",
    "ScanState",
]
