"""Wire codec for the row store protocol.

Pure framing logic with no side effects beyond reading from the stream it
is handed. See remote_table.domain.entities.frame for the frame layout.

Replies are tagged with a discriminator byte, so a row whose bytes happen
to spell "success" or "eof" is still a row: the decoder never inspects
payload bytes to decide what kind of reply it is holding.
"""

from __future__ import annotations

from typing import Protocol

from remote_table.domain.entities import (
    MAX_STATUS_TOKEN_LENGTH,
    DataReply,
    Opcode,
    Reply,
    ReplyKind,
    StatusReply,
)
from remote_table.domain.errors import MalformedFrameError, ShortReadError


class ByteSource(Protocol):
    """Anything that yields up to n bytes per call and b"" at end of stream."""

    def recv(self, max_bytes: int) -> bytes: ...


def read_exact(stream: ByteSource, count: int) -> bytes:
    """Read exactly count bytes from stream.

    Args:
        stream: Source to read from.
        count: Number of bytes the frame promises.

    Returns:
        Exactly count bytes.

    Raises:
        ShortReadError: If the stream ends first.
    """
    chunks: list[bytes] = []
    received = 0
    while received < count:
        chunk = stream.recv(count - received)
        if not chunk:
            raise ShortReadError(expected=count, received=received)
        chunks.append(chunk)
        received += len(chunk)
    return b"".join(chunks)


def encode_write(row: bytes, record_length: int) -> bytes:
    """Encode a WRITE request frame.

    Raises:
        ValueError: If the row is not exactly record_length bytes.
    """
    if len(row) != record_length:
        raise ValueError(
            f"Row size mismatch: got {len(row)}, expected {record_length}"
        )
    return Opcode.WRITE.wire + bytes(row)


def encode_next() -> bytes:
    """Encode a NEXT request frame."""
    return Opcode.NEXT.wire


def decode_reply(stream: ByteSource, expected_len: int) -> Reply:
    """Decode one reply frame from stream.

    Args:
        stream: Source positioned at the start of a reply.
        expected_len: Record length of the table; the size of a data reply.

    Returns:
        A StatusReply or a DataReply.

    Raises:
        ShortReadError: If the stream ends inside the frame.
        MalformedFrameError: If the discriminator is unknown or the
            status token is empty or not UTF-8.
    """
    discriminator = read_exact(stream, 1)[0]

    if discriminator == ReplyKind.DATA:
        return DataReply(row=read_exact(stream, expected_len))

    if discriminator == ReplyKind.STATUS:
        length = read_exact(stream, 1)[0]
        if length == 0:
            raise MalformedFrameError("Empty status token")
        raw = read_exact(stream, length)
        try:
            token = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedFrameError(f"Status token is not UTF-8: {raw!r}") from exc
        return StatusReply(token=token)

    raise MalformedFrameError(f"Unknown reply discriminator: 0x{discriminator:02x}")


# Peer side of the protocol, for row store implementations and test peers.

def encode_status_reply(token: str) -> bytes:
    """Encode a STATUS reply frame.

    Raises:
        ValueError: If the token is empty or longer than 255 bytes.
    """
    raw = token.encode("utf-8")
    if not 0 < len(raw) <= MAX_STATUS_TOKEN_LENGTH:
        raise ValueError(
            f"Status token must be 1..{MAX_STATUS_TOKEN_LENGTH} bytes, got {len(raw)}"
        )
    return ReplyKind.STATUS.wire + bytes([len(raw)]) + raw


def encode_data_reply(row: bytes) -> bytes:
    """Encode a DATA reply frame."""
    return ReplyKind.DATA.wire + bytes(row)


def decode_request(stream: ByteSource, record_length: int) -> tuple[Opcode, bytes | None]:
    """Decode one request frame from stream.

    Returns:
        The opcode and, for WRITE, the row payload.

    Raises:
        ShortReadError: If the stream ends inside the frame.
        MalformedFrameError: If the opcode is unknown.
    """
    code = read_exact(stream, 1)[0]
    try:
        opcode = Opcode(code)
    except ValueError as exc:
        raise MalformedFrameError(f"Unknown opcode: 0x{code:02x}") from exc

    if opcode is Opcode.WRITE:
        return opcode, read_exact(stream, record_length)
    return opcode, None
