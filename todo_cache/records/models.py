"""
Record Definitions

The todo record served by the service and the error raised when a
mutation is deliberately failed.
"""

from dataclasses import asdict, dataclass
from typing import Dict

# Passing this as a record type makes create/update fail on purpose, so
# clients can exercise their rollback of optimistic updates.
FAIL_SENTINEL = "fail"


@dataclass(frozen=True)
class Record:
    """
    A todo item.

    Attributes:
        id: Service-assigned identifier, never changed by updates
        type: Free-form classifier used by type lookups
        description: Free-form text
    """
    id: str
    type: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        """Plain dict form used for the wire encoding."""
        return asdict(self)


class SimulatedFailure(Exception):
    """Raised when a mutation is called with the "fail" sentinel type."""

    def __init__(self, message: str = f"failed on type == {FAIL_SENTINEL}"):
        super().__init__(message)
