"""Error type shared by every stage of a seating run."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    INPUT_SHAPE = "input_shape"
    DUPLICATE_NAMES = "duplicate_names"
    GROUP_COUNT_MISMATCH = "group_count_mismatch"
    INSUFFICIENT_ATTENDEES = "insufficient_attendees"
    UNASSIGNED_LEFTOVERS = "unassigned_leftovers"
    UNKNOWN_TABLE = "unknown_table"
    TABLE_OVER_CAPACITY = "table_over_capacity"
    ZONE_VIOLATION = "zone_violation"
    UNMATCHED_ATTENDEES = "unmatched_attendees"
    DIRECTORY_UNAVAILABLE = "directory_unavailable"
    BATCH_WRITE_FAILED = "batch_write_failed"
    REPORT_WRITE_FAILED = "report_write_failed"
    CONFIGURATION = "configuration"


class AllocationError(ValueError):
    """Raised when a run must stop.

    ``kind`` tells callers which stage failed and ``context`` carries the
    names, counts and table labels quoted in the message.
    """

    def __init__(self, kind: ErrorKind, message: str, **context: Any) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.context: Dict[str, Any] = context

    def __str__(self) -> str:
        return self.message
