import pathlib
from typing import Dict, List

import pandas as pd
import pytest

from reception_seating.directory import DirectoryGuest
from reception_seating.errors import AllocationError, ErrorKind
from reception_seating.models import AttendeeRecord
from reception_seating.plan import EXPECTED_GROUP_COUNTS

SHEET_COLUMNS = ["Table Grouping", "First Name", "Last Name", "Suffix", "Reception", "Ceremony", "Meal Choice"]


def make_record(line_number: int, first: str, last: str, group: str = "", **status: str) -> AttendeeRecord:
    return AttendeeRecord(line_number=line_number, first_name=first, last_name=last, group=group, status=status)


def group_records(counts: Dict[str, int], start_line: int = 2) -> List[AttendeeRecord]:
    """One record per seat, named after the group and position."""
    records = []
    line = start_line
    for group, count in counts.items():
        for i in range(count):
            surname = (group or "Sweetheart").replace(" ", "").replace("-", "")
            records.append(make_record(line, f"Guest{i + 1}", surname, group))
            line += 1
    return records


def reception_rows() -> List[Dict[str, str]]:
    rows = []
    for record in group_records(EXPECTED_GROUP_COUNTS):
        rows.append({
            "Table Grouping": record.group,
            "First Name": record.first_name,
            "Last Name": record.last_name,
            "Suffix": "",
            "Reception": "Attending",
            "Ceremony": "Attending",
            "Meal Choice": "Local Fresh Catch",
        })
    return rows


def write_sheet(path: pathlib.Path, rows: List[Dict[str, str]]) -> pathlib.Path:
    pd.DataFrame(rows, columns=SHEET_COLUMNS).to_csv(path, index=False)
    return path


@pytest.fixture
def reception_sheet(tmp_path):
    return write_sheet(tmp_path / "seating-groups.csv", reception_rows())


class FakeDirectory:
    """In-memory stand-in for the Supabase guest directory."""

    def __init__(self, names, fail_on_batch=None):
        self.guests = [DirectoryGuest(id=f"id-{i}", full_name_norm=name) for i, name in enumerate(names)]
        self.batches = []
        self.fail_on_batch = fail_on_batch

    def fetch_guests(self):
        return list(self.guests)

    def upsert_table_labels(self, rows):
        if len(self.batches) == self.fail_on_batch:
            raise AllocationError(ErrorKind.BATCH_WRITE_FAILED, "Could not update seating labels: boom")
        self.batches.append(rows)
