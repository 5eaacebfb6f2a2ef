"""Duplicate-name handling.

Two guests who normalize to the same ``first last`` key cannot be told apart
downstream, so known collisions are relabeled by giving one of the pair a
"Jr" suffix. Each collision is described by a :class:`RenameRule`; the rule's
strategy decides which row is the junior:

* :class:`LatestLineNumber` picks the row that appears later in the sheet.
* :class:`ByRelatedFingerprint` compares the attendance/meal answers of each
  candidate with those of a related guest (a spouse, say) and picks the one
  that matches, falling back to the earliest row.
"""
from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from .errors import AllocationError, ErrorKind
from .models import AttendeeRecord, RenameOutcome, clean_string, normalize_name_part

logger = logging.getLogger(__name__)

FINGERPRINT_COLUMNS = ("Reception", "Ceremony", "Cocktail Hour", "After Party", "Meal Choice")

_TRAILING_JR = re.compile(r"\s+jr$", re.IGNORECASE)

NOT_APPLICABLE = "no_two_duplicate_rows"


@dataclass(frozen=True)
class LatestLineNumber:
    """The later of the two rows becomes the junior."""


@dataclass(frozen=True)
class ByRelatedFingerprint:
    """Match a candidate against ``related_name``'s answers."""

    related_name: str
    matched_reason: str = "matched_related"


RenameStrategy = Union[LatestLineNumber, ByRelatedFingerprint]


@dataclass(frozen=True)
class RenameRule:
    normalized_name: str
    strategy: RenameStrategy


def status_fingerprint(record: AttendeeRecord) -> str:
    return "|".join(clean_string(record.status.get(column, "")).lower() for column in FINGERPRINT_COLUMNS)


def junior_last_name(last_name: str) -> str:
    base = _TRAILING_JR.sub("", clean_string(last_name)).strip()
    return f"{base} Jr"


def _pick_junior(
    candidates: List[AttendeeRecord], records: Sequence[AttendeeRecord], strategy: RenameStrategy
) -> Tuple[AttendeeRecord, str]:
    if isinstance(strategy, LatestLineNumber):
        return max(candidates, key=lambda r: r.line_number), "latest_row"

    related = next((r for r in records if r.full_name_norm == strategy.related_name), None)
    if related is not None:
        fingerprint = status_fingerprint(related)
        for candidate in candidates:
            if status_fingerprint(candidate) == fingerprint:
                return candidate, strategy.matched_reason
        logger.info("No %s row matches %s; using the earliest row", candidates[0].full_name_norm, strategy.related_name)
    return candidates[0], "default_first_row"


def apply_rename_rule(
    records: Sequence[AttendeeRecord], rule: RenameRule
) -> Tuple[List[AttendeeRecord], RenameOutcome]:
    """Apply one rule and return the new record list plus its audit entry.

    Anything other than exactly two matching rows leaves the list untouched;
    that is expected on sheets where the pair was already fixed.
    """
    candidates = [r for r in records if r.full_name_norm == rule.normalized_name]
    if len(candidates) != 2:
        return list(records), RenameOutcome(applied=False, line_number=None, reason=NOT_APPLICABLE)

    target, reason = _pick_junior(candidates, records, rule.strategy)
    renamed = target.with_last_name(junior_last_name(target.last_name))
    logger.debug("Line %d renamed to %s (%s)", target.line_number, renamed.full_name_norm, reason)

    updated = [renamed if r is target else r for r in records]
    return updated, RenameOutcome(applied=True, line_number=target.line_number, reason=reason)


def resolve_name_conflicts(
    records: Sequence[AttendeeRecord], rules: Iterable[RenameRule]
) -> Tuple[List[AttendeeRecord], Dict[str, RenameOutcome]]:
    """Run every rule in order. Outcomes are keyed by the rule's name."""
    current = list(records)
    outcomes: Dict[str, RenameOutcome] = {}
    for rule in rules:
        current, outcomes[rule.normalized_name] = apply_rename_rule(current, rule)
    return current, outcomes


def is_placeholder_name(record: AttendeeRecord) -> bool:
    """Unnamed plus-ones are exported as first name 'Guest' with no last name."""
    return normalize_name_part(record.first_name) == "guest" and not normalize_name_part(record.last_name)


def count_duplicates(values: Iterable[str]) -> List[Tuple[str, int]]:
    """Values seen more than once, most frequent first."""
    counts = Counter(values)
    duplicates = [(value, count) for value, count in counts.items() if count > 1]
    return sorted(duplicates, key=lambda item: -item[1])


def assert_unique_full_names(records: Sequence[AttendeeRecord]) -> None:
    counts = Counter(r.full_name_norm for r in records)
    duplicates = [(name, count) for name, count in counts.items() if count > 1]
    if duplicates:
        summary = ", ".join(f"{name} ({count})" for name, count in duplicates)
        raise AllocationError(
            ErrorKind.DUPLICATE_NAMES,
            f"Duplicate attendee names remain after normalization: {summary}",
            duplicates=dict(duplicates),
        )
