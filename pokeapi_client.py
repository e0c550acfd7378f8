"""
pokeapi_client.py
=================
Client for the public PokeAPI REST service (https://pokeapi.co).

Only two endpoints are used:

* ``GET /pokemon?limit=N``   → catalog listing (``get_entry_list``)
* ``GET /pokemon/{name}``    → single entry detail (``get_entry_detail``)

Both methods block; the controller runs them in a worker thread.  Every
failure (network, HTTP status, malformed payload) is raised as
:class:`PokeAPIError` so callers only have one exception type to handle.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from app.models import EntryDetail, EntrySummary

logger = logging.getLogger('pokedex.api')

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2/"


class PokeAPIError(Exception):
    """Raised when a PokeAPI request fails or returns an unusable body."""

    def __init__(self, message: str, url: str = '') -> None:
        super().__init__(message)
        self.url = url


class PokeAPIClient:
    """Blocking PokeAPI client backed by a shared :class:`requests.Session`.

    Args:
        base_url: API root, with or without a trailing slash.
        timeout:  HTTP request timeout in seconds.
        session:  Optional pre-built session (tests inject a mock here).
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10,
                 session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault('Accept', 'application/json')

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise PokeAPIError(f"Request to {url} failed: {e}", url) from e
        try:
            data = response.json()
        except ValueError as e:
            # json() raises a ValueError subclass on a non-JSON body
            raise PokeAPIError(f"Invalid JSON from {url}: {e}", url) from e
        if not isinstance(data, dict):
            raise PokeAPIError(f"Unexpected response shape from {url}", url)
        return data

    def get_entry_list(self, limit: int = 151) -> List[EntrySummary]:
        """Return the first *limit* catalog entries in server order."""
        data = self._get_json('pokemon', params={'limit': limit})
        try:
            entries = [EntrySummary.from_json(item) for item in data['results']]
        except (KeyError, TypeError, ValueError) as e:
            raise PokeAPIError(f"Malformed catalog listing: {e}", self.base_url) from e
        logger.info("Fetched %d catalog entries", len(entries))
        return entries

    def get_entry_detail(self, name: str) -> EntryDetail:
        """Return the detail record for the entry called *name*."""
        data = self._get_json(f'pokemon/{name}')
        try:
            return EntryDetail.from_json(data)
        except (KeyError, TypeError, ValueError) as e:
            raise PokeAPIError(f"Malformed detail for {name!r}: {e}", self.base_url) from e
