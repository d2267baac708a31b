"""Client for the REST Countries name search endpoint."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from requests.exceptions import RequestException

from world_explorer.models.country import CountryView
from .errors import LookupFailed

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://restcountries.com/v3.1"


class LookupClient:
    """
    One GET per query, no retry and no caching.

    The search is a partial-name match (``fullText=false``); the first match
    returned by the API wins.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def build_url(self, name: str) -> str:
        return f"{self.base_url}/name/{quote(name, safe='')}"

    def find(self, name: str) -> CountryView:
        """Look up a country by (partial) name.

        Raises LookupFailed for any HTTP, network or payload problem.
        """
        url = self.build_url(name)
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, params={"fullText": "false"}, timeout=self.timeout)
        except RequestException as e:
            raise LookupFailed(f"Request for {name!r} failed: {e}") from e

        if not resp.ok:
            raise LookupFailed(f"API error: {resp.status_code}", status_code=resp.status_code)

        try:
            data: Any = resp.json()
        except ValueError as e:
            raise LookupFailed("API returned a non-JSON body", status_code=resp.status_code) from e

        if not isinstance(data, list) or not data:
            raise LookupFailed("No results found", status_code=resp.status_code)

        country = CountryView.from_raw(data[0])
        logger.info("Lookup %r matched %s (%d result(s))", name, country.name, len(data))
        return country

    def fetch_flag(self, url: str) -> bytes:
        """Download a flag image for display.

        Uses its own request rather than the lookup session, so a flag
        download never shares a connection pool with a search or with close().
        """
        if not url:
            raise LookupFailed("No flag image available")
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except RequestException as e:
            raise LookupFailed(f"Flag download failed: {e}") from e
        return resp.content

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "LookupClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
