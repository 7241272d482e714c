"""Persisted search-history document models.

These Pydantic v2 models describe the on-disk JSON layout of the search
history log.  The live objects (:class:`~src.models.search.SearchResult`
and :class:`~src.interfaces.query_search.QuerySearch`) convert themselves
to and from these records; nothing else in the codebase reads or writes
the history file format directly.

Layout::

    {"version": 1,
     "entries": [{"engine": "bing", "query": "...", "max_results": 10,
                  "timestamp": "2024-05-01T12:00:00Z", "state": "completed",
                  "results": [{"query": "...", "url": "...", "headline": "...",
                               "summary": "...", "click_count": 0}]}]}
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

HISTORY_FORMAT_VERSION = 1


class SearchResultRecord(BaseModel):
    """One persisted search result."""

    model_config = ConfigDict(frozen=True)

    query: str
    url: str
    headline: str
    summary: str
    click_count: int = Field(default=0, ge=0)


class SearchRecord(BaseModel):
    """One persisted search: the query, its cap, when it ran and what it found."""

    model_config = ConfigDict(frozen=True)

    engine: str
    query: str
    max_results: int = Field(default=10, ge=1)
    # Always set for persisted searches; history refuses never-executed ones.
    timestamp: datetime
    state: str = "completed"
    results: list[SearchResultRecord] = Field(default_factory=list)


class HistoryDocument(BaseModel):
    """The whole history file."""

    model_config = ConfigDict(frozen=True)

    version: int = HISTORY_FORMAT_VERSION
    entries: list[SearchRecord] = Field(default_factory=list)
