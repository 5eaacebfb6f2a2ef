"""Checks run on the allocator's output before anything is written."""
from __future__ import annotations

from typing import Dict, List, Sequence

from .errors import AllocationError, ErrorKind
from .models import SeatingPlan, TableAssignment


def count_by_table(assignments: Sequence[TableAssignment]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for assignment in assignments:
        counts[assignment.table_label] = counts.get(assignment.table_label, 0) + 1
    return counts


def validate_table_capacities(assignments: Sequence[TableAssignment], plan: SeatingPlan) -> Dict[str, int]:
    """Return guests per table, raising on unknown or overfull tables."""
    counts = count_by_table(assignments)
    for table_label, count in counts.items():
        if table_label not in plan.table_capacity:
            raise AllocationError(
                ErrorKind.UNKNOWN_TABLE,
                f"Unknown table label in plan output: {table_label}",
                table=table_label,
            )
        capacity = plan.table_capacity[table_label]
        if count > capacity:
            raise AllocationError(
                ErrorKind.TABLE_OVER_CAPACITY,
                f"Table over capacity: {table_label} has {count}, capacity {capacity}",
                table=table_label,
                count=count,
                capacity=capacity,
            )
    return counts


def validate_zone_constraints(assignments: Sequence[TableAssignment], plan: SeatingPlan) -> None:
    """Every guest of a zoned grouping must sit inside that zone."""
    tables_by_group: Dict[str, List[str]] = {}
    for assignment in assignments:
        tables = tables_by_group.setdefault(assignment.source_group, [])
        if assignment.table_label not in tables:
            tables.append(assignment.table_label)

    for rule in plan.zone_rules:
        if rule.zone not in plan.zones:
            raise AllocationError(
                ErrorKind.CONFIGURATION,
                f"Zone rule for {rule.group} names an unknown zone: {rule.zone}",
                group=rule.group,
                zone=rule.zone,
            )
        allowed = plan.zones[rule.zone]
        for table_label in tables_by_group.get(rule.group, []):
            if table_label not in allowed:
                raise AllocationError(
                    ErrorKind.ZONE_VIOLATION,
                    f"Constraint failure: {rule.group} guest assigned outside {rule.zone} at {table_label}",
                    group=rule.group,
                    zone=rule.zone,
                    table=table_label,
                )
