"""Value objects for the remote table domain.

Value objects are immutable types that represent domain concepts.

Exports:
    - Endpoint: Address and I/O bounds of the remote row store
    - HandlerResult: Integer result codes returned to the host
"""

from remote_table.domain.value_objects.endpoint import Endpoint
from remote_table.domain.value_objects.handler_result import HandlerResult

__all__ = [
    "Endpoint",
    "HandlerResult",
]
