"""Frame vocabulary of the row store protocol.

Requests are a single opcode byte, followed for WRITE by exactly one row:

    Opcode | Byte | Payload
    -------|------|-----------------------------
    WRITE  | 'w'  | record_length bytes of row
    NEXT   | 'r'  | none

Replies lead with a discriminator byte so that control and data are told
apart before any payload is read:

    Kind   | Byte | Payload
    -------|------|-----------------------------------------
    STATUS | 0x00 | length (1 byte) + UTF-8 status token
    DATA   | 0x01 | record_length bytes of row
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union


class Opcode(IntEnum):
    """Request operation codes (single byte on the wire)."""

    WRITE = ord("w")
    NEXT = ord("r")

    @property
    def wire(self) -> bytes:
        """Return the opcode as it appears on the wire."""
        return bytes([self.value])


class ReplyKind(IntEnum):
    """Reply discriminator byte."""

    STATUS = 0x00
    DATA = 0x01

    @property
    def wire(self) -> bytes:
        """Return the discriminator as it appears on the wire."""
        return bytes([self.value])


class StatusToken(str, Enum):
    """Status tokens the row store is known to send."""

    SUCCESS = "success"
    EOF = "eof"
    ERROR = "error"


MAX_STATUS_TOKEN_LENGTH = 255


@dataclass(frozen=True, slots=True)
class StatusReply:
    """A control reply carrying a short textual token."""

    token: str

    @property
    def kind(self) -> ReplyKind:
        return ReplyKind.STATUS

    @property
    def is_success(self) -> bool:
        """Check whether the peer acknowledged a write."""
        return self.token == StatusToken.SUCCESS.value

    @property
    def is_eof(self) -> bool:
        """Check whether the peer reported the end of a scan."""
        return self.token == StatusToken.EOF.value


@dataclass(frozen=True, slots=True)
class DataReply:
    """A data reply carrying exactly one row."""

    row: bytes

    @property
    def kind(self) -> ReplyKind:
        return ReplyKind.DATA

    def __repr__(self) -> str:
        return f"DataReply({len(self.row)} bytes)"


Reply = Union[StatusReply, DataReply]
