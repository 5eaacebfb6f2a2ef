"""Summary and assignment report files."""
from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from .errors import AllocationError, ErrorKind
from .models import RenameOutcome, TableAssignment

ASSIGNMENT_COLUMNS = ["tableLabel", "sourceGroup", "firstName", "lastName", "fullNameNorm", "lineNumber"]


@dataclass
class ReportPaths:
    summary_path: Path
    assignments_path: Path


def summarize(assignments: Sequence[TableAssignment]) -> Dict[str, Dict[str, int]]:
    """Guests per source group and per table, keys sorted."""
    by_group: Dict[str, int] = {}
    by_table: Dict[str, int] = {}
    for a in assignments:
        by_group[a.source_group] = by_group.get(a.source_group, 0) + 1
        by_table[a.table_label] = by_table.get(a.table_label, 0) + 1
    return {
        "groupCounts": dict(sorted(by_group.items())),
        "tableCounts": dict(sorted(by_table.items())),
    }


def open_seats_by_table(table_counts: Mapping[str, int], table_capacity: Mapping[str, int]) -> Dict[str, int]:
    return {label: capacity - table_counts.get(label, 0) for label, capacity in table_capacity.items()}


def build_summary(
    input_path: str,
    assignments: Sequence[TableAssignment],
    table_counts: Mapping[str, int],
    table_capacity: Mapping[str, int],
    renames: Mapping[str, RenameOutcome],
    updated_count: Optional[int] = None,
    generated_at: Optional[datetime] = None,
) -> Dict[str, object]:
    """``updated_count`` is ``None`` for a dry run."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        "inputPath": input_path,
        "totalAssigned": len(assignments),
        "tableCounts": dict(sorted(table_counts.items())),
        "openSeatsByTable": open_seats_by_table(table_counts, table_capacity),
        "applyMode": updated_count is not None,
        "updatedCount": updated_count or 0,
        "renames": {name: outcome.as_dict() for name, outcome in renames.items()},
        "generatedAt": generated_at.isoformat(),
    }


def assignment_row(a: TableAssignment) -> Dict[str, object]:
    return {
        "tableLabel": a.table_label,
        "sourceGroup": a.source_group,
        "firstName": a.first_name,
        "lastName": a.last_name,
        "fullNameNorm": a.full_name_norm,
        "lineNumber": a.line_number,
    }


def write_assignments_csv(path: Path, assignments: Sequence[TableAssignment]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=ASSIGNMENT_COLUMNS, lineterminator="\n")
        w.writeheader()
        for a in assignments:
            w.writerow(assignment_row(a))


def write_reports(
    report_dir: Path,
    summary: Mapping[str, object],
    assignments: Sequence[TableAssignment],
    stamp: Optional[str] = None,
) -> ReportPaths:
    """Write ``seating-plan-summary-<stamp>.json`` and the assignments CSV."""
    stamp = stamp or datetime.now().strftime("%Y%m%d")
    paths = ReportPaths(
        summary_path=report_dir / f"seating-plan-summary-{stamp}.json",
        assignments_path=report_dir / f"seating-plan-assignments-{stamp}.csv",
    )
    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        paths.summary_path.write_text(json.dumps(summary, indent=2) + "\n", encoding="utf-8")
        write_assignments_csv(paths.assignments_path, assignments)
    except OSError as exc:
        raise AllocationError(
            ErrorKind.REPORT_WRITE_FAILED, f"Could not write seating reports to {report_dir}: {exc}", path=str(report_dir)
        ) from exc
    return paths
