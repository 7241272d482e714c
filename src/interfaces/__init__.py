"""Public interface definitions for searchtrail.

Every search engine is reached exclusively through the abstract base class
defined in this package.  Concrete engine searches implement the hook and
are chosen at runtime by name (see ``src/main.py``), so the history store
and the CLI never depend on a specific engine.

CONCRETE IMPLEMENTATION MAP:
    Interface      →  Concrete implementations
    ─────────────────────────────────────────────────────────────────────
    QuerySearch    →  BingSearch, DuckDuckGoSearch  (src/providers/search/)
                      StoredSearch                  (reloaded from history)

Re-exports
----------
QuerySearch, SearchState, StoredSearch
    Single-search contract, its lifecycle states and the history replay.
"""

from src.interfaces.query_search import (
    DEFAULT_MAX_RESULTS,
    QuerySearch,
    SearchState,
    StoredSearch,
)

__all__ = [
    "DEFAULT_MAX_RESULTS",
    "QuerySearch",
    "SearchState",
    "StoredSearch",
]
