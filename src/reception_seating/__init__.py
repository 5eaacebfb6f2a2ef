"""Reception seating plan package."""
from .models import AttendeeRecord, PlanSegment, SeatingPlan, TableAssignment, ZoneRule
from .errors import AllocationError, ErrorKind
from .loader import load_attendees
from .allocator import SeatingAllocator, allocate
from .pipeline import PlanResult, run_plan

__all__ = [
    "AttendeeRecord",
    "PlanSegment",
    "SeatingPlan",
    "TableAssignment",
    "ZoneRule",
    "AllocationError",
    "ErrorKind",
    "load_attendees",
    "SeatingAllocator",
    "allocate",
    "PlanResult",
    "run_plan",
]
