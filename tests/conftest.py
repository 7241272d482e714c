"""Shared pytest fixtures for the searchtrail test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from src.interfaces.query_search import QuerySearch, SearchState, StoredSearch
from src.models.search import SearchResult
from src.services.search_history import SearchHistory

# ---------------------------------------------------------------------------
# Fake engine
# ---------------------------------------------------------------------------


class FakeSearch(QuerySearch):
    """In-memory engine returning canned results (or raising a canned error)."""

    engine_name = "fake"

    def __init__(
        self,
        query: str,
        max_results: int = 10,
        hits: int = 3,
        error: BaseException | None = None,
    ) -> None:
        super().__init__(query, max_results)
        self.hits = hits
        self.error = error
        self.calls = 0

    async def _query_engine(self) -> list[SearchResult]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        slug = self.query.replace(" ", "-")
        return [
            SearchResult(
                query=self.query,
                url=f"https://example.test/{slug}/{i}",
                headline=f"Result {i} for {self.query}",
                summary=f"Summary {i}",
            )
            for i in range(min(self.hits, self.max_results))
        ]


def make_stored_search(
    query: str,
    timestamp: datetime,
    results: int = 2,
    engine: str = "fake",
) -> StoredSearch:
    """Build an already-executed search with a fixed timestamp."""
    return StoredSearch(
        query=query,
        max_results=10,
        engine_name=engine,
        timestamp=timestamp,
        results=[
            SearchResult(
                query=query,
                url=f"https://example.test/{i}",
                headline=f"{query} #{i}",
                summary=f"About {query}",
            )
            for i in range(results)
        ],
        state=SearchState.COMPLETED,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    """Return a not-yet-existing history file path inside a temp dir."""
    return tmp_path / "data" / "history.ser"


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def five_searches(base_time: datetime) -> list[StoredSearch]:
    """Five searches one hour apart (t1 < t2 < t3 < t4 < t5)."""
    return [
        make_stored_search(f"query {i + 1}", base_time + timedelta(hours=i))
        for i in range(5)
    ]


@pytest.fixture
def populated_history(history_path: Path, five_searches: list[StoredSearch]) -> SearchHistory:
    history = SearchHistory(history_path)
    for search in five_searches:
        history.add_entry(search)
    return history


@pytest.fixture
def bing_payload() -> dict[str, Any]:
    """Minimal Bing Search API response with two results."""
    return {
        "d": {
            "results": [
                {
                    "ID": "a1",
                    "Url": "https://en.wikipedia.org/wiki/Acid_house",
                    "Title": "Acid house - Wikipedia",
                    "Description": "Acid house is a subgenre of house music...",
                    "DisplayUrl": "en.wikipedia.org/wiki/Acid_house",
                },
                {
                    "ID": "a2",
                    "Url": "https://ra.co/features/1234",
                    "Title": "The story of acid house",
                    "Description": "How a Roland TB-303 changed dance music.",
                    "DisplayUrl": "ra.co/features/1234",
                },
            ],
            "__next": "https://api.datamarket.azure.com/Bing/Search/Web?$skip=2",
        }
    }


@pytest.fixture
def fake_search_cls() -> type[FakeSearch]:
    """The in-memory engine class, for tests that construct their own searches."""
    return FakeSearch


@pytest.fixture
def stored_search_factory():
    """Factory building executed searches with fixed timestamps."""
    return make_stored_search
