"""
Route definitions for the book explorer page.

Endpoints:
- GET  /        : render the search page for the current session
- POST /search  : submit the search form (field ``q``)
- POST /retry   : run the last search again

Each browser session gets its own ``SearchView`` kept in memory and
identified by the ``explorer_session`` cookie.  Views are never
persisted; the least recently used one is dropped once
``max_sessions`` is reached.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections import OrderedDict
from functools import lru_cache
from typing import Optional, Tuple

from fastapi import APIRouter, Cookie, Depends, Form
from fastapi.responses import HTMLResponse

from ..config import get_settings
from .openlibrary_service import SearchClient
from .view import SearchView


logger = logging.getLogger(__name__)

SESSION_COOKIE = "explorer_session"

router = APIRouter(tags=["explorer"])


@lru_cache
def get_search_client() -> SearchClient:
    """Shared catalogue client built from settings."""
    settings = get_settings()
    return SearchClient(
        base_url=settings.catalog_url,
        timeout=settings.request_timeout_seconds,
        user_agent=settings.user_agent,
    )


# ---------------------------------------------------------------------------
# Session views
#
# Views are held in an LRU ordered mapping from session token to
# SearchView.  Requests are served from FastAPI's threadpool, so every
# access to the mapping goes through ``_views_lock``.  A single view is
# only mutated by requests carrying its own cookie.

_views: "OrderedDict[str, SearchView]" = OrderedDict()
_views_lock = threading.Lock()


def _log_transition(view: SearchView) -> None:
    logger.debug("Search state is now %s for %r", view.state.status, view.query)


def _get_view(session_id: Optional[str], client: SearchClient) -> Tuple[str, SearchView]:
    """Return the session's view, creating a new session when unknown."""
    settings = get_settings()
    with _views_lock:
        if session_id and session_id in _views:
            _views.move_to_end(session_id)
            return session_id, _views[session_id]
        session_id = secrets.token_urlsafe(16)
        view = SearchView(
            client,
            catalog_url=settings.catalog_url,
            covers_url=settings.covers_url,
        )
        view.subscribe(_log_transition)
        _views[session_id] = view
        while len(_views) > settings.max_sessions:
            evicted, _ = _views.popitem(last=False)
            logger.info("Dropped search view for session %s", evicted)
        return session_id, view


def reset_sessions() -> None:
    """Forget every session view."""
    with _views_lock:
        _views.clear()


def _page(session_id: str, view: SearchView) -> HTMLResponse:
    response = HTMLResponse(view.render())
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@router.get("/", response_class=HTMLResponse)
def search_page(
    explorer_session: Optional[str] = Cookie(default=None),
    client: SearchClient = Depends(get_search_client),
) -> HTMLResponse:
    session_id, view = _get_view(explorer_session, client)
    return _page(session_id, view)


@router.post("/search", response_class=HTMLResponse)
def submit_search(
    q: str = Form(default=""),
    explorer_session: Optional[str] = Cookie(default=None),
    client: SearchClient = Depends(get_search_client),
) -> HTMLResponse:
    """Store the submitted query and search for it.

    An empty or whitespace-only query leaves the search state as it was.
    Search failures are rendered in the page's error panel; they never
    turn into an HTTP error.
    """
    session_id, view = _get_view(explorer_session, client)
    view.set_query(q)
    view.submit()
    return _page(session_id, view)


@router.post("/retry", response_class=HTMLResponse)
def retry_search(
    explorer_session: Optional[str] = Cookie(default=None),
    client: SearchClient = Depends(get_search_client),
) -> HTMLResponse:
    session_id, view = _get_view(explorer_session, client)
    view.retry()
    return _page(session_id, view)
