"""
Plan-driven seating allocator.

Guests are bucketed by table grouping in spreadsheet order. Each plan segment
then takes the next ``seats`` guests of its grouping, so the same sheet and
the same plan always seat the same people together. The plan has to use up
every grouping exactly; a guest left over is an error, not a warning.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Tuple

from .errors import AllocationError, ErrorKind
from .models import AttendeeRecord, PlanSegment, SeatingPlan, TableAssignment, group_label

logger = logging.getLogger(__name__)

GroupBuckets = Dict[str, Tuple[AttendeeRecord, ...]]


def build_group_buckets(records: Sequence[AttendeeRecord]) -> GroupBuckets:
    """Group records by table grouping, keeping first-seen order."""
    buckets: Dict[str, List[AttendeeRecord]] = {}
    for record in records:
        buckets.setdefault(record.group, []).append(record)
    return {group: tuple(members) for group, members in buckets.items()}


def validate_group_counts(buckets: Mapping[str, Sequence[AttendeeRecord]], expected: Mapping[str, int]) -> None:
    for group, expected_count in expected.items():
        actual = len(buckets.get(group, ()))
        if actual != expected_count:
            raise AllocationError(
                ErrorKind.GROUP_COUNT_MISMATCH,
                f'Group count mismatch for "{group_label(group)}": expected {expected_count}, got {actual}',
                group=group,
                expected=expected_count,
                actual=actual,
            )


class SeatingAllocator:
    """Walks the plan segments and draws guests from each grouping in order."""

    def __init__(self, plan: SeatingPlan) -> None:
        self.plan = plan
        self.buckets: GroupBuckets = {}

    def build(self, records: Sequence[AttendeeRecord]) -> None:
        """Bucket the attendees and check group sizes against the plan."""
        self.buckets = build_group_buckets(records)
        validate_group_counts(self.buckets, self.plan.expected_group_counts)

    def _draw(
        self, segment: PlanSegment, cursors: Mapping[str, int]
    ) -> Tuple[Tuple[AttendeeRecord, ...], Dict[str, int]]:
        """Return the drawn guests and the cursors after the draw."""
        bucket = self.buckets.get(segment.group, ())
        start = cursors.get(segment.group, 0)
        available = len(bucket) - start
        if available < segment.seats:
            raise AllocationError(
                ErrorKind.INSUFFICIENT_ATTENDEES,
                f'Not enough guests in "{group_label(segment.group)}" for {segment.table_label}: '
                f"need {segment.seats}, have {available}",
                group=segment.group,
                table=segment.table_label,
                needed=segment.seats,
                available=available,
            )
        advanced = dict(cursors)
        advanced[segment.group] = start + segment.seats
        return bucket[start:start + segment.seats], advanced

    def solve(self) -> List[TableAssignment]:
        """Assign every bucketed guest to a table following the plan."""
        cursors: Dict[str, int] = {}
        assignments: List[TableAssignment] = []
        for segment in self.plan.segments:
            drawn, cursors = self._draw(segment, cursors)
            logger.debug("%s <- %d from %s", segment.table_label, len(drawn), group_label(segment.group))
            assignments.extend(TableAssignment.for_record(record, segment.table_label) for record in drawn)

        leftovers = {
            group: len(members) - cursors.get(group, 0)
            for group, members in self.buckets.items()
            if len(members) > cursors.get(group, 0)
        }
        if leftovers:
            summary = ", ".join(f"{group_label(group)}:{count}" for group, count in leftovers.items())
            raise AllocationError(
                ErrorKind.UNASSIGNED_LEFTOVERS,
                f"Unassigned guests remain after plan allocation: {summary}",
                leftovers=leftovers,
            )
        return assignments


def allocate(records: Sequence[AttendeeRecord], plan: SeatingPlan) -> List[TableAssignment]:
    """Convenience wrapper around :class:`SeatingAllocator`."""
    allocator = SeatingAllocator(plan)
    allocator.build(records)
    return allocator.solve()
