"""Shared fixtures: fake HTTP session and storages."""

import json
from typing import Any, List, Optional

import pytest
import requests

from world_explorer.services.errors import PersistenceReadFailed, PersistenceWriteFailed
from world_explorer.services.storage import InMemoryStorage, KeyValueStorage


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, body: Optional[str] = None, content: bytes = b""):
        self.status_code = status_code
        self._payload = payload
        self._body = body
        self.content = content

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is not None:
            return json.loads(self._body)
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Records requests and answers with queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses: List[Any] = list(responses)
        self.calls: List[dict] = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True


class FailingStorage(KeyValueStorage):
    """Storage whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True, initial: Optional[str] = None):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.value = initial
        self.write_attempts = 0

    def get(self, key):
        if self.fail_reads:
            raise PersistenceReadFailed(key, "disk unavailable")
        return self.value

    def set(self, key, value):
        self.write_attempts += 1
        if self.fail_writes:
            raise PersistenceWriteFailed(key, "disk full")
        self.value = value

    def remove(self, key):
        self.value = None


FRANCE = {
    "name": {"common": "France", "official": "French Republic"},
    "capital": ["Paris"],
    "region": "Europe",
    "subregion": "Western Europe",
    "population": 67391582,
    "area": 551695.0,
    "languages": {"fra": "French"},
    "timezones": ["UTC-10:00", "UTC+01:00"],
    "flags": {"png": "https://flagcdn.com/w320/fr.png", "svg": "https://flagcdn.com/fr.svg"},
    "maps": {"googleMaps": "https://goo.gl/maps/g7QxxSFsWyTPKuzd7", "openStreetMaps": "https://www.openstreetmap.org/relation/1403916"},
}


@pytest.fixture
def france_raw():
    return json.loads(json.dumps(FRANCE))


@pytest.fixture
def memory_storage():
    return InMemoryStorage()
