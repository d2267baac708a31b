"""Data model for a saved trip note."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def generate_id() -> str:
    return f"it-{uuid.uuid4().hex}"


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with milliseconds, e.g. 2025-07-31T10:22:45.120Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class ItineraryRecord:
    """A user-authored note associating a country with a date and free text.

    ``date`` is an ISO date (YYYY-MM-DD) or empty. ``created_at`` is set once
    when the record is first built and is carried through serialization.
    """

    country: str = ""
    date: str = ""
    notes: str = ""
    id: str = ""
    created_at: str = field(default_factory=utc_timestamp)

    def __post_init__(self):
        if not self.id:
            self.id = generate_id()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItineraryRecord":
        """Create a record from its stored form, tolerating missing keys."""
        data = dict(data or {})
        created_at: Optional[str] = data.get("createdAt") or data.get("created_at")
        kwargs = dict(
            country=str(data.get("country") or ""),
            date=str(data.get("date") or ""),
            notes=str(data.get("notes") or ""),
            id=str(data.get("id") or ""),
        )
        if isinstance(created_at, str) and created_at:
            kwargs["created_at"] = created_at
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, str]:
        """Stored form; keys match the layout written by earlier versions."""
        return {
            "id": self.id,
            "country": self.country,
            "date": self.date,
            "notes": self.notes,
            "createdAt": self.created_at,
        }

    def __str__(self):
        return f"{self.country} | {self.date}" if self.date else self.country
