"""Exception types shared by the lookup client and the itinerary store."""

from typing import Optional


class WorldExplorerError(Exception):
    """Base class for application errors."""


class LookupFailed(WorldExplorerError):
    """A country lookup returned no usable result.

    Raised for unsuccessful HTTP statuses, bodies that are not a non-empty JSON
    array, and network failures alike. The UI shows one generic message for all
    of them, so callers should not try to tell them apart.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceError(WorldExplorerError):
    """Reading or writing the persistent slot failed."""

    def __init__(self, key: str, message: str):
        super().__init__(f"{message} (key={key!r})")
        self.key = key


class PersistenceReadFailed(PersistenceError):
    pass


class PersistenceWriteFailed(PersistenceError):
    pass
