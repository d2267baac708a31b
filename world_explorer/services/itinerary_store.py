"""In-memory itinerary list mirrored to one persistent storage slot."""

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from world_explorer.models.itinerary import ItineraryRecord, generate_id
from .errors import PersistenceError, PersistenceReadFailed, PersistenceWriteFailed
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "world_explorer_itineraries"

# Accepted update keys -> dataclass attribute
_EDITABLE_FIELDS = {
    "country": "country",
    "date": "date",
    "notes": "notes",
}
_IMMUTABLE_FIELDS = {"id", "created_at", "createdAt"}


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a store mutation.

    ``matched`` is False when the target id was not found. ``error`` carries the
    persistence failure, if any; the in-memory change has been applied either way.
    """

    matched: bool = True
    error: Optional[PersistenceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ItineraryStore:
    """
    Ordered collection of ItineraryRecord (insertion order is display order).
    - Loaded fully from storage at construction; unreadable or malformed
      content yields an empty list and a logged error.
    - Every mutation re-serializes the whole list to the slot.
    - Storage failures are logged and returned in StoreResult, never raised.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self.load_error: Optional[PersistenceError] = None
        self._items: List[ItineraryRecord] = self._load()

    # Persistence

    def _load(self) -> List[ItineraryRecord]:
        try:
            raw = self.storage.get(self.storage_key)
        except PersistenceError as e:
            logger.error("Failed to load itineraries: %s", e)
            self.load_error = e
            return []
        if raw is None:
            logger.debug("No itineraries stored under %r", self.storage_key)
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("Failed to load itineraries: malformed JSON under %r: %s", self.storage_key, e)
            self.load_error = PersistenceReadFailed(self.storage_key, "Malformed itinerary data")
            return []
        if not isinstance(data, list):
            logger.error("Failed to load itineraries: expected a list under %r", self.storage_key)
            self.load_error = PersistenceReadFailed(self.storage_key, "Itinerary data is not a list")
            return []

        items = []
        for entry in data:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed itinerary entry: %r", entry)
                continue
            items.append(ItineraryRecord.from_dict(entry))
        logger.debug("Loaded %d itineraries", len(items))
        return items

    def serialize(self) -> str:
        return json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)

    def _save(self) -> Optional[PersistenceError]:
        try:
            self.storage.set(self.storage_key, self.serialize())
        except PersistenceError as e:
            # The list stays in memory for the rest of the session
            logger.error("Failed to save itineraries: %s", e)
            return e
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Failed to save itineraries")
            return PersistenceWriteFailed(self.storage_key, str(e))
        return None

    # Mutations

    def add(self, record: ItineraryRecord) -> StoreResult:
        if not record.country or not record.country.strip():
            raise ValueError("Itinerary country is required")
        if not record.id:
            record.id = generate_id()
        self._items.append(record)
        return StoreResult(error=self._save())

    def update(self, itinerary_id: str, changes: Mapping[str, Any]) -> StoreResult:
        """Overwrite the given fields of the first record with ``itinerary_id``.

        An unknown id is a no-op reported as ``matched=False``.
        """
        values = self._normalize_changes(changes)
        idx = next((i for i, it in enumerate(self._items) if it.id == itinerary_id), None)
        if idx is None:
            logger.info("Update skipped, no itinerary with id %s", itinerary_id)
            return StoreResult(matched=False)
        self._items[idx] = replace(self._items[idx], **values)
        return StoreResult(error=self._save())

    def delete(self, itinerary_id: str) -> StoreResult:
        before = len(self._items)
        self._items = [it for it in self._items if it.id != itinerary_id]
        return StoreResult(matched=len(self._items) < before, error=self._save())

    # Queries

    def get_all(self) -> Tuple[ItineraryRecord, ...]:
        return tuple(self._items)

    def get_by_id(self, itinerary_id: str) -> Optional[ItineraryRecord]:
        return next((it for it in self._items if it.id == itinerary_id), None)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ItineraryRecord]:
        return iter(tuple(self._items))

    @staticmethod
    def _normalize_changes(changes: Mapping[str, Any]) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for key, value in (changes or {}).items():
            if key in _IMMUTABLE_FIELDS:
                raise ValueError(f"Itinerary field {key!r} cannot be changed")
            attr = _EDITABLE_FIELDS.get(key)
            if attr is None:
                raise ValueError(f"Unknown itinerary field {key!r}")
            values[attr] = "" if value is None else str(value)
        if "country" in values and not values["country"].strip():
            raise ValueError("Itinerary country is required")
        return values
