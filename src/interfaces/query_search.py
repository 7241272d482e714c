"""Abstract base class for a single web search against one engine.

A :class:`QuerySearch` holds one query, the maximum number of results the
caller wants, the time it was executed and the results it produced.  The
shared :meth:`QuerySearch.execute` entry point stamps the timestamp and
then delegates the actual retrieval to the engine-specific
:meth:`QuerySearch._query_engine` hook, so the history and presentation
layers stay engine-agnostic.

Lifecycle::

    PENDING --execute()--> EXECUTING --+--> COMPLETED
                                       +--> FAILED

Executing a search a second time replaces its timestamp and results.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum

import structlog

from src.models.history import SearchRecord
from src.models.search import SearchResult
from src.utils.errors import QueryExecutionError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_RESULTS = 10


class SearchState(str, Enum):
    """Execution state of a :class:`QuerySearch`."""

    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


# Concrete implementations: BingSearch, DuckDuckGoSearch (src/providers/search/)
# and StoredSearch (a search reloaded from the history file).
class QuerySearch(ABC):
    """Contract for one search against one engine.

    Subclasses set :attr:`engine_name` and implement :meth:`_query_engine`.

    Parameters
    ----------
    query:
        The search query text.  Immutable after construction.
    max_results:
        Maximum number of results the engine hook may return (default 10).
    """

    engine_name: str = "base"

    def __init__(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> None:
        if max_results < 1:
            raise ValueError(f"max_results must be a positive integer, got {max_results}")
        self._query = query
        self._max_results = max_results
        self._timestamp: datetime | None = None
        self._results: list[SearchResult] = []
        self._state = SearchState.PENDING

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def max_results(self) -> int:
        return self._max_results

    @property
    def timestamp(self) -> datetime | None:
        """When the search was (last) executed, or ``None`` if it never ran."""
        return self._timestamp

    @property
    def results(self) -> list[SearchResult]:
        """Results in engine rank order.

        The list is a copy; the :class:`SearchResult` objects are shared so
        the presentation layer can bump their click counters.
        """
        return list(self._results)

    @property
    def state(self) -> SearchState:
        return self._state

    def get_provider_name(self) -> str:
        """Return the identifier of the engine this search runs against."""
        return self.engine_name

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self) -> list[SearchResult]:
        """Run the search and return its results.

        The timestamp is set to the current UTC time before the engine hook
        runs and keeps that value whether the hook succeeds or fails.

        Raises
        ------
        QueryExecutionError
            If the engine hook fails for any reason.  The search is left in
            the ``FAILED`` state with an empty result list.
        """
        self._timestamp = datetime.now(tz=timezone.utc)
        self._results = []
        self._state = SearchState.EXECUTING
        log = logger.bind(engine=self.engine_name, query=self._query)

        try:
            results = await self._query_engine()
        except asyncio.CancelledError:
            self._state = SearchState.FAILED
            log.info("search_cancelled")
            raise
        except QueryExecutionError as exc:
            self._state = SearchState.FAILED
            log.warning("search_failed", error=str(exc))
            raise
        except Exception as exc:
            self._state = SearchState.FAILED
            log.warning("search_failed", error=str(exc), error_type=type(exc).__name__)
            raise QueryExecutionError(
                message=f"Search for {self._query!r} failed: {exc}",
                provider_name=self.engine_name,
            ) from exc

        self._results = list(results)
        self._state = SearchState.COMPLETED
        log.info("search_executed", result_count=len(self._results))
        return list(self._results)

    @abstractmethod
    async def _query_engine(self) -> list[SearchResult]:
        """Retrieve and parse results from the engine.

        Implementations must return at most :attr:`max_results` results, in
        the order the engine ranked them.  Any exception raised here is
        surfaced from :meth:`execute` as a :class:`QueryExecutionError`.
        """

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_record(self) -> SearchRecord:
        """Snapshot this search into its persisted form.

        Raises
        ------
        ValueError
            If the search has never been executed.
        """
        if self._timestamp is None:
            raise ValueError(f"Search for {self._query!r} has not been executed")
        return SearchRecord(
            engine=self.engine_name,
            query=self._query,
            max_results=self._max_results,
            timestamp=self._timestamp,
            state=self._state.value,
            results=[result.to_record() for result in self._results],
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(query={self._query!r}, max_results={self._max_results}, "
            f"state={self._state.value}, results={len(self._results)})"
        )


class StoredSearch(QuerySearch):
    """A search reloaded from the history file.

    Carries the original engine name, timestamp, state and results.  It
    cannot be executed again; build a fresh engine search for that.
    """

    def __init__(
        self,
        query: str,
        max_results: int,
        engine_name: str,
        timestamp: datetime,
        results: list[SearchResult],
        state: SearchState = SearchState.COMPLETED,
    ) -> None:
        super().__init__(query, max_results)
        self.engine_name = engine_name
        self._timestamp = timestamp
        self._results = list(results)
        self._state = state

    @classmethod
    def from_record(cls, record: SearchRecord) -> StoredSearch:
        """Rebuild a search from its persisted record."""
        return cls(
            query=record.query,
            max_results=record.max_results,
            engine_name=record.engine,
            timestamp=record.timestamp,
            results=[SearchResult.from_record(r) for r in record.results],
            state=SearchState(record.state),
        )

    @classmethod
    def snapshot(cls, search: QuerySearch) -> StoredSearch:
        """Freeze an executed search's current timestamp and results.

        The result objects are shared with *search*, so clicks counted on
        either side land on the same counter.  Re-executing *search*
        afterwards does not touch the snapshot.

        Raises
        ------
        ValueError
            If *search* has never been executed.
        """
        if search.timestamp is None:
            raise ValueError(f"Search for {search.query!r} has not been executed")
        return cls(
            query=search.query,
            max_results=search.max_results,
            engine_name=search.get_provider_name(),
            timestamp=search.timestamp,
            results=search.results,
            state=search.state,
        )

    async def execute(self) -> list[SearchResult]:
        """Refuse to run; a stored search keeps its original timestamp and results."""
        raise self._refusal()

    async def _query_engine(self) -> list[SearchResult]:
        raise self._refusal()

    def _refusal(self) -> QueryExecutionError:
        return QueryExecutionError(
            message="Searches loaded from history cannot be re-executed",
            provider_name=self.engine_name,
        )
