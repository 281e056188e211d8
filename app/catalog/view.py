"""
Search page state and rendering.

``SearchView`` owns everything the page shows: the text in the search
box and a ``SearchState`` (idle, loading, loaded or failed).  Every
change of either marks the view dirty and notifies subscribed listeners,
which is how the page (or a test) learns it has to re-render.  Nothing
else reads or writes the state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .exceptions import SearchError
from .openlibrary_service import (
    CATALOG_URL,
    COVERS_URL,
    SearchClient,
    build_cover_url,
    build_detail_url,
)
from .schemas import BookCard, BookRecord, Failed, Idle, Loaded, Loading, SearchState


logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_YEAR = "Unknown"
MAX_SUBJECTS = 3

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)

Listener = Callable[["SearchView"], None]


def to_card(
    record: BookRecord,
    catalog_url: str = CATALOG_URL,
    covers_url: str = COVERS_URL,
) -> BookCard:
    """Resolve a record's optional fields into display text.

    Missing authors and year (a year of 0 counts as missing) fall back
    to fixed placeholders.  ISBN and subjects stay empty when absent so
    the template can skip their blocks; only the first ISBN and the
    first three subjects are kept.
    """
    authors = ", ".join(record.author_names) if record.author_names else UNKNOWN_AUTHOR
    year = str(record.first_publish_year) if record.first_publish_year else UNKNOWN_YEAR
    isbn = record.isbn_list[0] if record.isbn_list else None
    subjects = list(record.subjects[:MAX_SUBJECTS]) if record.subjects else []
    return BookCard(
        title=record.title,
        detail_url=build_detail_url(record.key, catalog_url),
        cover_url=build_cover_url(record.cover_id, covers_url),
        authors=authors,
        year=year,
        isbn=isbn,
        subjects=subjects,
    )


class SearchView:
    """State machine behind the search page.

    Idle/Loaded/Failed --submit(non-empty query)--> Loading
    Loading --success--> Loaded(results)
    Loading --SearchError--> Failed(message)
    """

    def __init__(
        self,
        client: SearchClient,
        catalog_url: str = CATALOG_URL,
        covers_url: str = COVERS_URL,
    ) -> None:
        self.client = client
        self.catalog_url = catalog_url
        self.covers_url = covers_url
        self._query = ""
        self._state: SearchState = Idle()
        self._listeners: List[Listener] = []
        self.dirty = True

    # -- observed state -------------------------------------------------

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def query(self) -> str:
        return self._query

    @property
    def loading(self) -> bool:
        return isinstance(self._state, Loading)

    @property
    def error_message(self) -> str:
        return self._state.message if isinstance(self._state, Failed) else ""

    @property
    def results(self) -> List[BookRecord]:
        return list(self._state.results) if isinstance(self._state, Loaded) else []

    @property
    def cards(self) -> List[BookCard]:
        return [to_card(r, self.catalog_url, self.covers_url) for r in self.results]

    @property
    def show_no_results(self) -> bool:
        # Empty, settled and with a query; Idle is the initial empty page
        return (
            not isinstance(self._state, Idle)
            and not self.loading
            and not self.results
            and bool(self._query.strip())
        )

    # -- listeners ------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(view)`` after every change of state or query."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        self.dirty = True
        for listener in list(self._listeners):
            listener(self)

    def _set_state(self, state: SearchState) -> None:
        logger.debug("Search view %s -> %s", self._state.status, state.status)
        self._state = state
        self._changed()

    # -- user actions ---------------------------------------------------

    def set_query(self, text: Optional[str]) -> None:
        text = text or ""
        if text == self._query:
            return
        self._query = text
        self._changed()

    def submit(self) -> bool:
        """Search for the current query.

        Returns ``False`` without touching any state when the query is
        empty or whitespace only.
        """
        query = self._query.strip()
        if not query:
            return False
        if self.loading:
            logger.warning("Search for %r submitted while another is in flight", query)

        self._set_state(Loading())
        try:
            results = self.client.search(query)
        except SearchError as exc:
            self._set_state(Failed(message=str(exc)))
            return True
        except Exception as exc:
            self._set_state(Failed(message=str(exc) or type(exc).__name__))
            raise
        self._set_state(Loaded(results=results))
        return True

    def retry(self) -> bool:
        """Run the previous search again."""
        return self.submit()

    # -- rendering ------------------------------------------------------

    def render(self) -> str:
        html = _env.get_template("search.html").render(view=self, cards=self.cards)
        self.dirty = False
        return html
