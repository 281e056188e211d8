"""
Open Library integration for the book explorer.  This module is the
only place that talks to the catalogue.  It exposes:

* ``SearchClient.search()``: run one free-text search against
  ``/search.json`` and return the hits as ``BookRecord`` models.

* ``build_detail_url()`` / ``build_cover_url()``: derive the links a
  results card points to from a record's key and cover id.

Requests are anonymous and made with the Python standard library.
Every failure (non-2xx status, network error, undecodable body) is
raised as a single ``SearchError`` whose message keeps the underlying
cause; nothing is retried or cached here.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, List, Optional

from pydantic import ValidationError

from .exceptions import SearchError
from .schemas import BookRecord


logger = logging.getLogger(__name__)


CATALOG_URL = "https://openlibrary.org"
COVERS_URL = "https://covers.openlibrary.org"
# Number of hits requested per search; not exposed to callers.
SEARCH_LIMIT = 10
DEFAULT_USER_AGENT = "book-explorer/1.0 (+https://openlibrary.org/developers/api)"


def _fail(reason: Any) -> SearchError:
    return SearchError(f"Failed to search books: {reason}")


def _http_get_json(url: str, timeout: float, user_agent: str) -> Any:
    """Perform an HTTP GET and return the parsed JSON body.

    A User-Agent and Accept header are sent because Open Library
    answers anonymous requests without them with 403.  Raises
    ``SearchError`` on any status outside 2xx, on transport errors and
    when the body is not valid JSON.
    """
    request = urllib.request.Request(
        url,
        headers={
            'User-Agent': user_agent,
            'Accept': 'application/json',
        },
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            status = response.status
            body = response.read()
    except urllib.error.HTTPError as exc:
        status = exc.code
        body = b""
    except (http.client.HTTPException, OSError, ValueError) as exc:
        logger.error("Error fetching %s: %s", url, exc)
        raise _fail(exc) from exc

    if not 200 <= status < 300:
        logger.warning("Open Library request to %s returned status %s", url, status)
        raise _fail(f"HTTP error! status: {status}")

    try:
        return json.loads(body.decode('utf-8'))
    except ValueError as exc:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        logger.error("Invalid JSON from %s: %s", url, exc)
        raise _fail(exc) from exc


def build_detail_url(key: str, host: str = CATALOG_URL) -> str:
    """Link to the record's page on the catalogue (``key`` starts with '/')."""
    return f"{host.rstrip('/')}{key}"


def build_cover_url(cover_id: Optional[int], host: str = COVERS_URL, size: str = "S") -> Optional[str]:
    """Construct a cover image URL from a numeric cover ID (0 means none)."""
    if not cover_id:
        return None
    return f"{host.rstrip('/')}/b/id/{cover_id}-{size}.jpg"


class SearchClient:
    """Thin client for the catalogue search endpoint."""

    def __init__(
        self,
        base_url: str = CATALOG_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.user_agent = user_agent

    def search_url(self, query: str) -> str:
        return (
            f"{self.base_url}/search.json"
            f"?q={urllib.parse.quote(query, safe='')}&limit={SEARCH_LIMIT}"
        )

    def search(self, query: str) -> List[BookRecord]:
        """Search the catalogue for ``query``.

        Each doc of the response's ``docs`` array is validated into a
        ``BookRecord``; a doc that still fails validation is logged and
        skipped so the other hits are kept.  A body without ``docs`` (or
        with ``docs: null``) is an empty result rather than an error.
        Raises ``SearchError`` for transport, status and JSON failures.
        """
        url = self.search_url(query)
        logger.info("Searching Open Library for %r", query)
        data = _http_get_json(url, self.timeout, self.user_agent)
        docs = data.get('docs') if isinstance(data, dict) else None
        if docs is None:
            return []
        if not isinstance(docs, list):
            raise _fail(f"unexpected 'docs' payload of type {type(docs).__name__}")
        records: List[BookRecord] = []
        for doc in docs:
            try:
                records.append(BookRecord.model_validate(doc))
            except ValidationError as exc:
                logger.warning("Skipping malformed search result from %s: %s", url, exc)
        return records


def search_books(query: str) -> List[BookRecord]:
    """Search with a default client against the public catalogue."""
    return SearchClient().search(query)
