"""Shared pytest fixtures."""

from __future__ import annotations

from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.catalog.openlibrary_service import SearchClient
from app.catalog.router import get_search_client, reset_sessions
from app.catalog.schemas import BookRecord
from app.catalog.view import SearchView
from app.main import app


class FakeSearchClient(SearchClient):
    """Records every query and answers with canned records or an error."""

    def __init__(self, records: Sequence[dict] = (), error: Optional[Exception] = None) -> None:
        super().__init__()
        self.records = list(records)
        self.error = error
        self.calls: List[str] = []

    def search(self, query: str) -> List[BookRecord]:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return [BookRecord.model_validate(doc) for doc in self.records]


DUNE_DOC = {
    "title": "Dune",
    "key": "/works/OL1W",
    "author_name": ["Frank Herbert"],
    "first_publish_year": 1965,
}


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def view(fake_client: FakeSearchClient) -> SearchView:
    return SearchView(fake_client)


@pytest.fixture
def web(fake_client: FakeSearchClient):
    reset_sessions()
    app.dependency_overrides[get_search_client] = lambda: fake_client
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
        reset_sessions()
