import json

import httpx
import pytest

from conftest import FakeDirectory
from reception_seating.directory import DirectoryGuest, SupabaseGuestDirectory, apply_assignments, chunk, resolve_guest
from reception_seating.errors import AllocationError, ErrorKind
from reception_seating.models import TableAssignment
from reception_seating.plan import NAME_ALIASES
from reception_seating.settings import Settings


def assignment(name, table="Table 1"):
    first, last = name.split(" ", 1)
    return TableAssignment(line_number=2, first_name=first, last_name=last, full_name_norm=name,
                           source_group="Kara", table_label=table)


def test_unmatched_guest_aborts_before_any_write():
    directory = FakeDirectory(["ann lee"])
    with pytest.raises(AllocationError, match="1 attendees were not found in guests table. Examples: bo kim") as excinfo:
        apply_assignments([assignment("ann lee"), assignment("bo kim")], directory, NAME_ALIASES)
    assert excinfo.value.kind is ErrorKind.UNMATCHED_ATTENDEES
    assert directory.batches == []


def test_aliases_work_in_both_directions():
    by_name = {"katie jaffe": DirectoryGuest("1", "katie jaffe"), "elle' tallent": DirectoryGuest("2", "elle' tallent")}
    assert resolve_guest(by_name, "katie margraf", NAME_ALIASES).id == "1"
    assert resolve_guest(by_name, "elle schacter ", NAME_ALIASES).id == "2"
    assert resolve_guest(by_name, "jane doe", NAME_ALIASES) is None


def test_writes_in_batches():
    names = [f"guest{i} kara" for i in range(450)]
    directory = FakeDirectory(names)
    updated = apply_assignments([assignment(n, "Table 4") for n in names], directory, {}, batch_size=200)

    assert updated == 450
    assert [len(b) for b in directory.batches] == [200, 200, 50]
    assert directory.batches[0][0] == {"id": "id-0", "table_label": "Table 4"}


def test_failed_batch_stops_the_run():
    names = [f"guest{i} kara" for i in range(5)]
    directory = FakeDirectory(names, fail_on_batch=1)
    with pytest.raises(AllocationError, match="Could not update seating labels"):
        apply_assignments([assignment(n) for n in names], directory, {}, batch_size=2)
    assert len(directory.batches) == 1


def test_chunk():
    assert [list(c) for c in chunk([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]


def supabase(handler):
    settings = Settings(supabase_url="https://wedding.supabase.co/", service_role_key="service-key")
    return SupabaseGuestDirectory(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_supabase_fetch_guests():
    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/guests"
        assert request.url.params["select"] == "id,full_name_norm"
        assert request.headers["apikey"] == "service-key"
        assert request.headers["authorization"] == "Bearer service-key"
        return httpx.Response(200, json=[{"id": 7, "full_name_norm": " ann lee "}])

    assert supabase(handler).fetch_guests() == [DirectoryGuest(id="7", full_name_norm="ann lee")]


def test_supabase_upsert_table_labels():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["prefer"] = request.headers["prefer"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(201)

    supabase(handler).upsert_table_labels([{"id": "7", "table_label": "Table 2"}])
    assert seen["params"] == {"on_conflict": "id"}
    assert "resolution=merge-duplicates" in seen["prefer"]
    assert seen["body"] == [{"id": "7", "table_label": "Table 2"}]


def test_supabase_errors_are_wrapped():
    directory = supabase(lambda request: httpx.Response(500, json={"message": "down"}))
    with pytest.raises(AllocationError) as excinfo:
        directory.fetch_guests()
    assert excinfo.value.kind is ErrorKind.DIRECTORY_UNAVAILABLE

    with pytest.raises(AllocationError, match="Could not update seating labels") as excinfo:
        directory.upsert_table_labels([{"id": "1", "table_label": "Table 1"}])
    assert excinfo.value.kind is ErrorKind.BATCH_WRITE_FAILED


def test_default_batch_size_is_two_hundred():
    names = [f"guest{i} kara" for i in range(201)]
    directory = FakeDirectory(names)
    apply_assignments([assignment(n) for n in names], directory, {})
    assert [len(b) for b in directory.batches] == [200, 1]


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>maintenance</html>"),
    httpx.Response(200, json=[{"full_name_norm": "ann lee"}]),
    httpx.Response(200, json={"message": "not a list"}),
])
def test_unreadable_guest_list_is_directory_unavailable(response):
    directory = supabase(lambda request: response)
    with pytest.raises(AllocationError, match="Could not load guests from Supabase") as excinfo:
        directory.fetch_guests()
    assert excinfo.value.kind is ErrorKind.DIRECTORY_UNAVAILABLE
