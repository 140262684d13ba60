"""Domain entities for the remote table handler.

Exports:
    Frames:
        - Opcode: Request operation codes (WRITE, NEXT)
        - ReplyKind: Reply discriminator (STATUS, DATA)
        - StatusToken: Known status tokens (success, eof, error)
        - StatusReply, DataReply: Decoded replies
        - Reply: Union of the two reply types
"""

from remote_table.domain.entities.frame import (
    MAX_STATUS_TOKEN_LENGTH,
    DataReply,
    Opcode,
    Reply,
    ReplyKind,
    StatusReply,
    StatusToken,
)

__all__ = [
    "MAX_STATUS_TOKEN_LENGTH",
    "Opcode",
    "ReplyKind",
    "StatusToken",
    "StatusReply",
    "DataReply",
    "Reply",
]
