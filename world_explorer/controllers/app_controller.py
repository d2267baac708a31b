"""Application controller to coordinate between UI and services."""

import itertools
import logging
import re
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Tuple

from world_explorer.models.country import CountryView
from world_explorer.models.itinerary import ItineraryRecord
from world_explorer.services.config_service import AppConfig
from world_explorer.services.errors import LookupFailed
from world_explorer.services.itinerary_store import ItineraryStore
from world_explorer.services.lookup_client import LookupClient
from world_explorer.services.storage import JsonFileStorage

logger = logging.getLogger(__name__)

MSG_EMPTY_QUERY = "Please enter a country name."
MSG_LOOKUP_FAILED = "Could not find country or an error occurred."
MSG_COUNTRY_REQUIRED = "Country name is required."
MSG_BAD_DATE = "Date must use the YYYY-MM-DD format."
MSG_ADDED = "Itinerary added."
MSG_UPDATED = "Itinerary updated."
MSG_EDITING = "Editing mode: make changes and press Add / Save."
MSG_SAVE_FAILED = "Saved for this session only: could not write to disk."

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class FormResult:
    """Outcome of a form action.

    ``applied`` is False when the input was rejected and nothing changed.
    ``persisted`` is False when the change is in memory but the disk write failed.
    """

    applied: bool
    message: str = ""
    persisted: bool = True

    @property
    def ok(self) -> bool:
        return self.applied and self.persisted


def _valid_iso_date(value: str) -> bool:
    # fromisoformat alone also takes week dates (2025-W01-1) on newer Pythons
    if not _ISO_DATE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


class AppController:
    """Controller class to manage application logic and coordinate components."""

    def __init__(self, lookup_client: LookupClient, store: ItineraryStore):
        self.lookup_client = lookup_client
        self.store = store

        # State variables
        self.editing_id: Optional[str] = None
        self._search_seq = itertools.count(1)
        self.latest_search: int = 0

        # Callbacks for UI updates
        self.on_country_found: Optional[Callable[[int, CountryView], None]] = None
        self.on_search_failed: Optional[Callable[[int, str], None]] = None
        self.on_itineraries_changed: Optional[Callable[[Tuple[ItineraryRecord, ...]], None]] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "AppController":
        client = LookupClient(config.api_base_url, timeout=config.request_timeout)
        store = ItineraryStore(JsonFileStorage(config.storage_path), config.storage_key)
        return cls(client, store)

    def close(self) -> None:
        self.lookup_client.close()

    # ---------- Search ----------

    def search(self, query: str) -> CountryView:
        """Synchronous lookup; raises LookupFailed with a user-facing message."""
        q = (query or "").strip()
        if not q:
            raise LookupFailed(MSG_EMPTY_QUERY)
        try:
            return self.lookup_client.find(q)
        except LookupFailed as e:
            logger.warning("Lookup for %r failed: %s", q, e)
            raise LookupFailed(MSG_LOOKUP_FAILED, status_code=e.status_code) from e

    def search_async(self, query: str) -> Optional[threading.Thread]:
        """Start a lookup in a background thread.

        Results go to on_country_found / on_search_failed together with the
        search number, so the UI can ignore anything older than latest_search.
        Returns None when the query is blank (reported synchronously).
        """
        seq = next(self._search_seq)
        self.latest_search = seq
        if not (query or "").strip():
            self._report_failure(seq, MSG_EMPTY_QUERY)
            return None

        thread = threading.Thread(target=self._search_thread, args=(seq, query))
        thread.daemon = True
        thread.start()
        return thread

    def _search_thread(self, seq: int, query: str):
        """Thread function for country lookup."""
        try:
            country = self.search(query)
        except LookupFailed as e:
            self._report_failure(seq, str(e))
            return
        except Exception:
            logger.exception("Unexpected error while searching for %r", query)
            self._report_failure(seq, MSG_LOOKUP_FAILED)
            return
        if self.on_country_found:
            self.on_country_found(seq, country)

    def _report_failure(self, seq: int, message: str):
        if self.on_search_failed:
            self.on_search_failed(seq, message)

    def is_latest(self, seq: int) -> bool:
        return seq == self.latest_search

    # ---------- Itineraries ----------

    def list_itineraries(self) -> Tuple[ItineraryRecord, ...]:
        return self.store.get_all()

    def save_country(self, country: CountryView) -> FormResult:
        """Save a looked-up country as a new itinerary entry."""
        record = ItineraryRecord(
            country=country.name,
            notes=f"Searched on {date.today().strftime('%x')}",
        )
        result = self.store.add(record)
        self._notify_changed()
        if not result.ok:
            return FormResult(True, MSG_SAVE_FAILED, persisted=False)
        return FormResult(
            True,
            f'Saved "{country.name}" to your itinerary. Open My Itinerary to edit details.',
        )

    def begin_edit(self, itinerary_id: str) -> Optional[ItineraryRecord]:
        record = self.store.get_by_id(itinerary_id)
        self.editing_id = record.id if record else None
        return record

    def cancel_edit(self) -> None:
        self.editing_id = None

    def submit_itinerary(self, country: str, date_text: str = "", notes: str = "") -> FormResult:
        """Add a new itinerary, or update the one being edited."""
        country = (country or "").strip()
        date_text = (date_text or "").strip()
        notes = (notes or "").strip()

        if not country:
            return FormResult(False, MSG_COUNTRY_REQUIRED)
        if date_text and not _valid_iso_date(date_text):
            return FormResult(False, MSG_BAD_DATE)

        record_id = None
        if self.editing_id:
            record_id = self.editing_id
            result = self.store.update(record_id, {"country": country, "date": date_text, "notes": notes})
            message = MSG_UPDATED
            if not result.matched:
                # Record vanished while editing; keep the user's input
                record_id = None
        if record_id is None:
            record = ItineraryRecord(country=country, date=date_text, notes=notes)
            record_id = record.id
            result = self.store.add(record)
            message = MSG_ADDED

        self._notify_changed()
        if not result.ok:
            # The change is in memory; stay on this record so a retry updates it
            self.editing_id = record_id
            return FormResult(True, MSG_SAVE_FAILED, persisted=False)
        self.editing_id = None
        return FormResult(True, message)

    def delete_itinerary(self, itinerary_id: str) -> FormResult:
        result = self.store.delete(itinerary_id)
        if self.editing_id == itinerary_id:
            self.editing_id = None
        self._notify_changed()
        if not result.ok:
            return FormResult(result.matched, MSG_SAVE_FAILED, persisted=False)
        return FormResult(result.matched)

    def _notify_changed(self):
        if self.on_itineraries_changed:
            self.on_itineraries_changed(self.store.get_all())
