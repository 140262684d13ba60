"""Result codes returned to the host engine."""

from __future__ import annotations

from enum import IntEnum


class HandlerResult(IntEnum):
    """Integer result codes understood by the host storage-engine interface.

    The host has no richer vocabulary for this handler: every protocol
    failure collapses onto GENERIC_FAILURE.
    """

    SUCCESS = 0
    GENERIC_FAILURE = -1
    WRONG_COMMAND = 131  # operation not supported
    END_OF_FILE = 137  # scan has no more rows

    @property
    def is_error(self) -> bool:
        """Check whether the host should treat this code as an error."""
        return self not in (HandlerResult.SUCCESS, HandlerResult.END_OF_FILE)
