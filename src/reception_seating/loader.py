"""Spreadsheet loading utilities."""
from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import IO, Any, List

import pandas as pd

from .errors import AllocationError, ErrorKind
from .models import AttendeeRecord, clean_string
from .names import FINGERPRINT_COLUMNS

logger = logging.getLogger(__name__)

GROUP_COLUMN = "Table Grouping"
FIRST_NAME_COLUMN = "First Name"
LAST_NAME_COLUMN = "Last Name"
SUFFIX_COLUMN = "Suffix"
RECEPTION_COLUMN = "Reception"

REQUIRED_COLUMNS = [GROUP_COLUMN, FIRST_NAME_COLUMN, LAST_NAME_COLUMN, SUFFIX_COLUMN, RECEPTION_COLUMN]

# Row 1 of the sheet holds the headers.
_FIRST_DATA_LINE = 2


def read_sheet(path: Path | str | IO[Any]) -> pd.DataFrame:
    """Read every cell of the first sheet as a string.

    ``.csv`` paths go through ``read_csv``; anything else is treated as an
    Excel workbook.
    """
    try:
        if str(getattr(path, "name", path)).lower().endswith(".csv"):
            df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=False)
        else:
            df = pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False, engine="openpyxl")
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise AllocationError(ErrorKind.INPUT_SHAPE, f"Could not read seating spreadsheet {path}: {exc}", path=str(path)) from exc
    df.columns = [clean_string(c) for c in df.columns]
    return df


def load_attendees(path: Path | str | IO[Any]) -> List[AttendeeRecord]:
    """Load guests attending the reception.

    The suffix column is folded into the last name so that "Kidd" + "Jr"
    becomes "Kidd Jr".
    """
    df = read_sheet(path)
    if df.empty:
        raise AllocationError(ErrorKind.INPUT_SHAPE, "Workbook is missing guest rows.", path=str(path))

    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise AllocationError(
                ErrorKind.INPUT_SHAPE,
                f"Missing required column in seating spreadsheet: {column}",
                column=column,
            )

    attendees: List[AttendeeRecord] = []
    for index, row in df.iterrows():
        if clean_string(row[RECEPTION_COLUMN]).lower() != "attending":
            continue
        last_name = clean_string(row[LAST_NAME_COLUMN])
        suffix = clean_string(row[SUFFIX_COLUMN])
        if suffix:
            last_name = f"{last_name} {suffix}".strip()
        attendees.append(
            AttendeeRecord(
                line_number=int(index) + _FIRST_DATA_LINE,
                first_name=clean_string(row[FIRST_NAME_COLUMN]),
                last_name=last_name,
                group=clean_string(row[GROUP_COLUMN]),
                status={column: clean_string(row.get(column, "")) for column in FINGERPRINT_COLUMNS},
            )
        )

    logger.info("Loaded %d attending guests from %s", len(attendees), path)
    return attendees
