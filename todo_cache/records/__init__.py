"""Record service module for todo-cache."""

from .models import FAIL_SENTINEL, Record, SimulatedFailure
from .service import RecordService, generate_id

__all__ = [
    "FAIL_SENTINEL",
    "Record",
    "RecordService",
    "SimulatedFailure",
    "generate_id",
]
