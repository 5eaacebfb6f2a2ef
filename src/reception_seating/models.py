"""Data models for the reception seating plan."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set
import math
import re

_WHITESPACE = re.compile(r"\s+")


def clean_string(value: object) -> str:
    """Return ``value`` as a trimmed string.

    ``None`` and the ``float('nan')`` pandas uses for empty cells both become
    an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def normalize_name_part(value: object) -> str:
    """Lowercase a name part and collapse inner whitespace."""
    return _WHITESPACE.sub(" ", clean_string(value).lower())


def normalize_full_name(first_name: object, last_name: object) -> str:
    """Build the ``first last`` key used to tell attendees apart."""
    return f"{normalize_name_part(first_name)} {normalize_name_part(last_name)}".strip()


def group_label(group: str) -> str:
    """Printable form of a source group; the sweetheart table has no label."""
    return group or "(blank)"


@dataclass(frozen=True)
class AttendeeRecord:
    """One attending guest read from the seating spreadsheet."""

    line_number: int
    first_name: str
    last_name: str
    group: str = ""
    status: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def full_name_norm(self) -> str:
        return normalize_full_name(self.first_name, self.last_name)

    def with_last_name(self, last_name: str) -> "AttendeeRecord":
        return replace(self, last_name=last_name)


@dataclass(frozen=True)
class PlanSegment:
    """Seat ``seats`` guests from ``group`` at ``table_label``."""

    table_label: str
    group: str
    seats: int


@dataclass(frozen=True)
class TableAssignment:
    """Final table for a single attendee."""

    line_number: int
    first_name: str
    last_name: str
    full_name_norm: str
    source_group: str
    table_label: str

    @classmethod
    def for_record(cls, record: AttendeeRecord, table_label: str) -> "TableAssignment":
        return cls(
            line_number=record.line_number,
            first_name=record.first_name,
            last_name=record.last_name,
            full_name_norm=record.full_name_norm,
            source_group=record.group,
            table_label=table_label,
        )


@dataclass(frozen=True)
class ZoneRule:
    """Guests of ``group`` may only sit at tables in ``zone``."""

    group: str
    zone: str


@dataclass(frozen=True)
class RenameOutcome:
    """Audit entry for one duplicate-name rule."""

    applied: bool
    line_number: Optional[int]
    reason: str

    def as_dict(self) -> Dict[str, object]:
        return {"applied": self.applied, "lineNumber": self.line_number, "reason": self.reason}


@dataclass
class SeatingPlan:
    """Static configuration the allocator and validator run against."""

    table_capacity: Dict[str, int]
    segments: List[PlanSegment]
    expected_group_counts: Dict[str, int] = field(default_factory=dict)
    zones: Dict[str, Set[str]] = field(default_factory=dict)
    zone_rules: List[ZoneRule] = field(default_factory=list)

    @property
    def total_seats(self) -> int:
        return sum(segment.seats for segment in self.segments)
