"""searchtrail domain models — re-exports all public model classes.

The models are split by concern:
    - search.py   — the live SearchResult value object shared by every engine
    - history.py  — Pydantic records describing the persisted history file

Import from ``src.models`` rather than the individual submodules.
"""

from __future__ import annotations

from src.models.history import (
    HISTORY_FORMAT_VERSION,
    HistoryDocument,
    SearchRecord,
    SearchResultRecord,
)
from src.models.search import SearchResult, validate_absolute_url

__all__ = [
    "HISTORY_FORMAT_VERSION",
    "HistoryDocument",
    "SearchRecord",
    "SearchResult",
    "SearchResultRecord",
    "validate_absolute_url",
]
