"""Tests for the UI-independent application controller."""

import json
import threading

import pytest

from world_explorer.controllers.app_controller import (
    MSG_ADDED, MSG_BAD_DATE, MSG_COUNTRY_REQUIRED, MSG_EMPTY_QUERY, MSG_LOOKUP_FAILED,
    MSG_SAVE_FAILED, MSG_UPDATED, AppController, FormResult,
)
from world_explorer.models.country import CountryView
from world_explorer.services.config_service import AppConfig
from world_explorer.services.errors import LookupFailed
from world_explorer.services.itinerary_store import ItineraryStore
from world_explorer.services.lookup_client import LookupClient
from world_explorer.services.storage import JsonFileStorage

from conftest import FailingStorage, FakeResponse, FakeSession


def make_controller(*responses, storage=None):
    client = LookupClient(session=FakeSession(*responses))
    store = ItineraryStore(storage if storage is not None else FailingStorage(fail_writes=False))
    return AppController(client, store)


def test_search_trims_query(france_raw):
    controller = make_controller(FakeResponse(200, [france_raw]))

    country = controller.search("  France ")

    assert country.name == "France"
    assert controller.lookup_client.session.calls[0]["url"].endswith("/name/France")


def test_blank_search_is_rejected_without_network():
    controller = make_controller()

    with pytest.raises(LookupFailed, match=MSG_EMPTY_QUERY):
        controller.search("   ")
    assert controller.lookup_client.session.calls == []


@pytest.mark.parametrize(
    "response",
    [FakeResponse(200, []), FakeResponse(404, {}), FakeResponse(500, {})],
)
def test_search_failures_share_one_message(response):
    controller = make_controller(response)

    with pytest.raises(LookupFailed) as excinfo:
        controller.search("Wakanda")

    assert str(excinfo.value) == MSG_LOOKUP_FAILED


def test_search_async_reports_result(france_raw):
    controller = make_controller(FakeResponse(200, [france_raw]))
    found = []
    done = threading.Event()

    def on_found(seq, country):
        found.append((seq, country))
        done.set()

    controller.on_country_found = on_found
    thread = controller.search_async("France")
    thread.join(timeout=5)

    assert done.is_set()
    seq, country = found[0]
    assert country.name == "France"
    assert controller.is_latest(seq)


def test_search_async_reports_failure():
    controller = make_controller(FakeResponse(200, []))
    failures = []
    controller.on_search_failed = lambda seq, msg: failures.append(msg)

    controller.search_async("Wakanda").join(timeout=5)

    assert failures == [MSG_LOOKUP_FAILED]


def test_search_async_blank_query_fails_immediately():
    controller = make_controller()
    failures = []
    controller.on_search_failed = lambda seq, msg: failures.append(msg)

    assert controller.search_async("") is None
    assert failures == [MSG_EMPTY_QUERY]


def test_newer_search_supersedes_older(france_raw):
    controller = make_controller(FakeResponse(200, [france_raw]), FakeResponse(200, [france_raw]))
    seqs = []
    controller.on_country_found = lambda seq, c: seqs.append(seq)

    controller.search_async("France").join(timeout=5)
    controller.search_async("France").join(timeout=5)

    first, second = sorted(seqs)
    assert not controller.is_latest(first)
    assert controller.is_latest(second)


def test_save_country_adds_record_with_search_note(france_raw):
    controller = make_controller()
    changes = []
    controller.on_itineraries_changed = changes.append

    result = controller.save_country(CountryView.from_raw(france_raw))

    assert result == FormResult(True, 'Saved "France" to your itinerary. Open My Itinerary to edit details.')
    (record,) = controller.list_itineraries()
    assert record.country == "France"
    assert record.notes.startswith("Searched on ")
    assert record.date == ""
    assert changes == [(record,)]


def test_submit_adds_itinerary():
    controller = make_controller()

    result = controller.submit_itinerary(" Peru ", "2025-09-01", " Machu Picchu ")

    assert result == FormResult(True, MSG_ADDED)
    (record,) = controller.list_itineraries()
    assert (record.country, record.date, record.notes) == ("Peru", "2025-09-01", "Machu Picchu")


@pytest.mark.parametrize(
    "country, date_text, message",
    [("", "", MSG_COUNTRY_REQUIRED), ("   ", "2025-01-01", MSG_COUNTRY_REQUIRED),
     ("Peru", "next week", MSG_BAD_DATE), ("Peru", "2025-02-30", MSG_BAD_DATE), ("Peru", "20250101", MSG_BAD_DATE),
     ("Peru", "2025-W01-1", MSG_BAD_DATE), ("Peru", "2025-001", MSG_BAD_DATE)],
)
def test_submit_validation(country, date_text, message):
    controller = make_controller()

    result = controller.submit_itinerary(country, date_text)

    assert result == FormResult(False, message)
    assert controller.list_itineraries() == ()


def test_edit_flow_updates_and_leaves_edit_mode():
    controller = make_controller()
    controller.submit_itinerary("Peru", "", "old")
    (record,) = controller.list_itineraries()

    assert controller.begin_edit(record.id) == record
    assert controller.editing_id == record.id

    result = controller.submit_itinerary("Peru", "2025-10-10", "new")

    assert result == FormResult(True, MSG_UPDATED)
    assert controller.editing_id is None
    (updated,) = controller.list_itineraries()
    assert (updated.id, updated.date, updated.notes, updated.created_at) == (
        record.id, "2025-10-10", "new", record.created_at
    )


def test_cancel_edit_returns_to_add_mode():
    controller = make_controller()
    controller.submit_itinerary("Peru")
    controller.begin_edit(controller.list_itineraries()[0].id)

    controller.cancel_edit()
    controller.submit_itinerary("Chile")

    assert [r.country for r in controller.list_itineraries()] == ["Peru", "Chile"]


def test_begin_edit_unknown_id():
    controller = make_controller()
    assert controller.begin_edit("it-missing") is None
    assert controller.editing_id is None


def test_edit_of_deleted_record_is_saved_as_new():
    controller = make_controller()
    controller.submit_itinerary("Peru")
    record = controller.list_itineraries()[0]
    controller.begin_edit(record.id)
    controller.store.delete(record.id)

    result = controller.submit_itinerary("Peru", "", "kept")

    assert result == FormResult(True, MSG_ADDED)
    assert [r.notes for r in controller.list_itineraries()] == ["kept"]


def test_delete_itinerary_clears_edit_mode():
    controller = make_controller()
    controller.submit_itinerary("Peru")
    record = controller.list_itineraries()[0]
    controller.begin_edit(record.id)

    result = controller.delete_itinerary(record.id)

    assert result.ok
    assert controller.editing_id is None
    assert controller.list_itineraries() == ()


def test_save_failure_is_reported_but_kept_in_memory():
    controller = make_controller(storage=FailingStorage(fail_writes=True))

    result = controller.submit_itinerary("Peru")

    assert result == FormResult(True, MSG_SAVE_FAILED, persisted=False)
    assert result.applied and not result.ok
    assert [r.country for r in controller.list_itineraries()] == ["Peru"]


def test_resubmit_after_failed_save_does_not_duplicate():
    storage = FailingStorage(fail_writes=True)
    controller = make_controller(storage=storage)

    first = controller.submit_itinerary("Peru", "", "draft")
    (record,) = controller.list_itineraries()
    assert not first.persisted
    assert controller.editing_id == record.id

    again = controller.submit_itinerary("Peru", "", "draft")
    assert again == FormResult(True, MSG_SAVE_FAILED, persisted=False)
    assert len(controller.list_itineraries()) == 1

    storage.fail_writes = False
    final = controller.submit_itinerary("Peru", "2025-09-01", "booked")

    assert final == FormResult(True, MSG_UPDATED)
    assert controller.editing_id is None
    (saved,) = controller.list_itineraries()
    assert (saved.id, saved.date, saved.notes) == (record.id, "2025-09-01", "booked")
    assert json.loads(storage.value)[0]["id"] == record.id


def test_failed_delete_is_applied_but_not_persisted():
    storage = FailingStorage(fail_writes=False)
    controller = make_controller(storage=storage)
    controller.submit_itinerary("Peru")
    (record,) = controller.list_itineraries()
    storage.fail_writes = True

    result = controller.delete_itinerary(record.id)

    assert result == FormResult(True, MSG_SAVE_FAILED, persisted=False)
    assert controller.list_itineraries() == ()


def test_from_config(tmp_path):
    config = AppConfig(
        api_base_url="https://example.test/v3.1",
        storage_path=str(tmp_path / "local_storage.json"),
        storage_key="trips",
        request_timeout=3.0,
    )

    controller = AppController.from_config(config)
    try:
        assert controller.lookup_client.base_url == "https://example.test/v3.1"
        assert controller.lookup_client.timeout == 3.0
        assert isinstance(controller.store.storage, JsonFileStorage)
        assert controller.store.storage_key == "trips"
    finally:
        controller.close()
