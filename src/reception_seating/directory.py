"""Writing table labels back to the guest directory."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence, TypeVar

import httpx

from .errors import AllocationError, ErrorKind
from .models import TableAssignment, clean_string
from .plan import DIRECTORY_BATCH_SIZE
from .settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNMATCHED_PREVIEW = 10


@dataclass(frozen=True)
class DirectoryGuest:
    id: str
    full_name_norm: str


class GuestDirectory(Protocol):
    def fetch_guests(self) -> List[DirectoryGuest]: ...

    def upsert_table_labels(self, rows: List[Dict[str, Any]]) -> None: ...


class SupabaseGuestDirectory:
    """Minimal PostgREST client for the ``guests`` table."""

    def __init__(self, settings: Settings, *, client: Optional[httpx.Client] = None, table: str = "guests") -> None:
        self.settings = settings
        self.table = table
        self._client = client or httpx.Client(timeout=settings.request_timeout)

    @property
    def _endpoint(self) -> str:
        return f"{self.settings.rest_url}/{self.table}"

    def _headers(self, **extra: str) -> Dict[str, str]:
        key = self.settings.service_role_key
        headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        headers.update(extra)
        return headers

    def fetch_guests(self) -> List[DirectoryGuest]:
        try:
            resp = self._client.get(self._endpoint, params={"select": "id,full_name_norm"}, headers=self._headers())
            resp.raise_for_status()
            return [
                DirectoryGuest(id=str(row["id"]), full_name_norm=clean_string(row.get("full_name_norm")))
                for row in resp.json() or []
            ]
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise AllocationError(
                ErrorKind.DIRECTORY_UNAVAILABLE, f"Could not load guests from Supabase: {exc!r}"
            ) from exc

    def upsert_table_labels(self, rows: List[Dict[str, Any]]) -> None:
        headers = self._headers(Prefer="resolution=merge-duplicates,return=minimal")
        try:
            resp = self._client.post(self._endpoint, params={"on_conflict": "id"}, json=rows, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise AllocationError(
                ErrorKind.BATCH_WRITE_FAILED, f"Could not update seating labels: {exc}", batch_size=len(rows)
            ) from exc

    def close(self) -> None:
        self._client.close()


def chunk(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


def resolve_guest(
    guest_by_name: Mapping[str, DirectoryGuest], full_name_norm: str, aliases: Mapping[str, Sequence[str]]
) -> Optional[DirectoryGuest]:
    """Look a guest up by name, then by each configured alias."""
    name = clean_string(full_name_norm)
    guest = guest_by_name.get(name)
    if guest is not None:
        return guest
    for alias in aliases.get(name, ()):
        guest = guest_by_name.get(alias)
        if guest is not None:
            logger.debug("Matched %s via alias %s", name, alias)
            return guest
    return None


def apply_assignments(
    assignments: Sequence[TableAssignment],
    directory: GuestDirectory,
    aliases: Mapping[str, Sequence[str]],
    batch_size: int = DIRECTORY_BATCH_SIZE,
) -> int:
    """Write every table label, or nothing if any guest is unknown.

    Batches already written stay written if a later batch fails.
    """
    guest_by_name = {guest.full_name_norm: guest for guest in directory.fetch_guests()}

    rows: List[Dict[str, Any]] = []
    unmatched: List[str] = []
    for assignment in assignments:
        guest = resolve_guest(guest_by_name, assignment.full_name_norm, aliases)
        if guest is None:
            unmatched.append(assignment.full_name_norm)
        else:
            rows.append({"id": guest.id, "table_label": assignment.table_label})

    if unmatched:
        preview = ", ".join(unmatched[:_UNMATCHED_PREVIEW])
        raise AllocationError(
            ErrorKind.UNMATCHED_ATTENDEES,
            f"Cannot apply seating plan. {len(unmatched)} attendees were not found in guests table. "
            f"Examples: {preview}",
            unmatched=unmatched,
        )

    for batch in chunk(rows, batch_size):
        directory.upsert_table_labels(list(batch))
        logger.info("Updated %d guests", len(batch))
    return len(rows)
