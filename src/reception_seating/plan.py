"""Reception floor plan for the wedding weekend.

The plan reads top to bottom: each segment seats the next ``seats`` guests of
a table grouping, in spreadsheet order. Expected group sizes catch a sheet
that was edited after the plan was drawn up.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Set

from .models import PlanSegment, SeatingPlan, ZoneRule
from .names import ByRelatedFingerprint, LatestLineNumber, RenameRule

DEFAULT_INPUT_PATH = Path("/Users/kara/Desktop/Seating Groups.xlsx")
REPORT_DIR = Path("docs/import-reports")
DIRECTORY_BATCH_SIZE = 200

TABLE_CAPACITY: Dict[str, int] = {
    "Sweetheart": 2,
    "Table 1": 10,
    "Table 2": 18,
    "Table 3": 10,
    "Table 4": 18,
    "Table 5": 10,
    "Table 6": 10,
    "Table 7": 12,
    "Table 8": 12,
    "Table 9": 10,
}

LEFT_ZONE = "left zone"
RIGHT_CLUSTER = "right cluster"

ZONES: Dict[str, Set[str]] = {
    LEFT_ZONE: {"Table 1", "Table 2", "Table 5", "Table 7"},
    RIGHT_CLUSTER: {"Table 3", "Table 4", "Table 6", "Table 8", "Table 9"},
}

ZONE_RULES: List[ZoneRule] = [
    ZoneRule("Work", LEFT_ZONE),
    ZoneRule("Kara", RIGHT_CLUSTER),
    ZoneRule("Kevin-Kyle", RIGHT_CLUSTER),
    ZoneRule("BD", RIGHT_CLUSTER),
]

PLAN_SEGMENTS: List[PlanSegment] = [
    PlanSegment("Sweetheart", "", 2),
    PlanSegment("Table 2", "Bridal Party", 18),
    PlanSegment("Table 4", "Kara", 18),
    PlanSegment("Table 7", "Work", 12),
    PlanSegment("Table 8", "Kevin-OG", 12),
    PlanSegment("Table 6", "BD", 10),
    PlanSegment("Table 3", "Kara", 9),
    PlanSegment("Table 9", "Kevin-Kyle", 3),
    PlanSegment("Table 9", "Katie", 4),
    PlanSegment("Table 9", "BD", 2),
    PlanSegment("Table 1", "Work", 2),
    PlanSegment("Table 1", "Bridal Party", 4),
    PlanSegment("Table 5", "Kevin-OG", 5),
]

EXPECTED_GROUP_COUNTS: Dict[str, int] = {
    "": 2,
    "Bridal Party": 22,
    "Kara": 27,
    "Kevin-OG": 17,
    "Work": 14,
    "BD": 12,
    "Kevin-Kyle": 3,
    "Katie": 4,
}

RENAME_RULES: List[RenameRule] = [
    RenameRule("stephen boyd", ByRelatedFingerprint("sarah boyd", matched_reason="matched_sarah")),
    RenameRule("robert kidd", LatestLineNumber()),
    RenameRule("eric sennott", LatestLineNumber()),
]

# Guests whose name in the directory differs from the seating sheet.
NAME_ALIASES: Dict[str, List[str]] = {
    "katie margraf": ["katie jaffe"],
    "katie jaffe": ["katie margraf"],
    "elle' tallent": ["elle schacter"],
    "elle schacter": ["elle' tallent"],
}


def default_plan() -> SeatingPlan:
    return SeatingPlan(
        table_capacity=dict(TABLE_CAPACITY),
        segments=list(PLAN_SEGMENTS),
        expected_group_counts=dict(EXPECTED_GROUP_COUNTS),
        zones={name: set(tables) for name, tables in ZONES.items()},
        zone_rules=list(ZONE_RULES),
    )
