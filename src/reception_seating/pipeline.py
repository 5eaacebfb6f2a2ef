"""One seating run from loaded attendees to validated assignments."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from .allocator import allocate
from .models import AttendeeRecord, RenameOutcome, SeatingPlan, TableAssignment
from .names import RenameRule, assert_unique_full_names, resolve_name_conflicts
from .validation import validate_table_capacities, validate_zone_constraints

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    attendees: List[AttendeeRecord]
    assignments: List[TableAssignment]
    table_counts: Dict[str, int]
    renames: Dict[str, RenameOutcome]


def run_plan(
    records: Sequence[AttendeeRecord],
    plan: SeatingPlan,
    rename_rules: Iterable[RenameRule] = (),
) -> PlanResult:
    """Resolve names, allocate and validate. Raises ``AllocationError``."""
    attendees, renames = resolve_name_conflicts(records, rename_rules)
    assert_unique_full_names(attendees)

    assignments = allocate(attendees, plan)
    table_counts = validate_table_capacities(assignments, plan)
    validate_zone_constraints(assignments, plan)

    logger.info("Seated %d guests at %d tables", len(assignments), len(table_counts))
    return PlanResult(attendees=attendees, assignments=assignments, table_counts=table_counts, renames=renames)
