import json
from datetime import datetime, timezone

import pytest

from conftest import group_records
from reception_seating.errors import AllocationError, ErrorKind
from reception_seating.models import RenameOutcome
from reception_seating.pipeline import run_plan
from reception_seating.plan import EXPECTED_GROUP_COUNTS, RENAME_RULES, default_plan
from reception_seating.report import build_summary, open_seats_by_table, summarize, write_reports


def planned():
    plan = default_plan()
    return plan, run_plan(group_records(EXPECTED_GROUP_COUNTS), plan, RENAME_RULES)


def test_summarize_sorts_keys():
    _, result = planned()
    counts = summarize(result.assignments)
    assert list(counts["tableCounts"]) == sorted(counts["tableCounts"])
    assert counts["groupCounts"] == dict(sorted(EXPECTED_GROUP_COUNTS.items()))
    assert counts["tableCounts"]["Table 1"] == 6


def test_open_seats_cover_every_configured_table():
    assert open_seats_by_table({"Table 1": 6}, {"Table 1": 10, "Table 5": 10}) == {"Table 1": 4, "Table 5": 10}


def test_summary_fields():
    plan, result = planned()
    stamp = datetime(2026, 3, 14, 18, 0, tzinfo=timezone.utc)
    summary = build_summary("groups.xlsx", result.assignments, result.table_counts, plan.table_capacity,
                            {"robert kidd": RenameOutcome(True, 9, "latest_row")}, generated_at=stamp)

    assert summary["totalAssigned"] == 101
    assert summary["applyMode"] is False
    assert summary["updatedCount"] == 0
    assert summary["openSeatsByTable"]["Table 5"] == 5
    assert summary["renames"] == {"robert kidd": {"applied": True, "lineNumber": 9, "reason": "latest_row"}}
    assert summary["generatedAt"] == "2026-03-14T18:00:00+00:00"

    applied = build_summary("groups.xlsx", result.assignments, result.table_counts, plan.table_capacity, {},
                            updated_count=101, generated_at=stamp)
    assert (applied["applyMode"], applied["updatedCount"]) == (True, 101)


def test_reports_are_deterministic(tmp_path):
    plan, result = planned()
    summary = build_summary("in.csv", result.assignments, result.table_counts, plan.table_capacity, result.renames)

    first = write_reports(tmp_path / "a", summary, result.assignments, stamp="20260314")
    _, again = planned()
    second = write_reports(tmp_path / "b", summary, again.assignments, stamp="20260314")

    assert first.assignments_path.name == "seating-plan-assignments-20260314.csv"
    assert first.assignments_path.read_bytes() == second.assignments_path.read_bytes()

    lines = first.assignments_path.read_text().splitlines()
    assert lines[0] == "tableLabel,sourceGroup,firstName,lastName,fullNameNorm,lineNumber"
    assert lines[1] == "Sweetheart,,Guest1,Sweetheart,guest1 sweetheart,2"
    assert len(lines) == 102

    loaded = json.loads(first.summary_path.read_text())
    assert loaded["totalAssigned"] == 101
    assert first.summary_path.read_text().endswith("}\n")


def test_unwritable_report_dir(tmp_path):
    plan, result = planned()
    summary = build_summary("in.csv", result.assignments, result.table_counts, plan.table_capacity, {})
    blocker = tmp_path / "reports"
    blocker.write_text("")

    with pytest.raises(AllocationError, match="Could not write seating reports") as excinfo:
        write_reports(blocker / "sub", summary, result.assignments, stamp="20260314")
    assert excinfo.value.kind is ErrorKind.REPORT_WRITE_FAILED
