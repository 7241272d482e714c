"""DuckDuckGo web search implementing QuerySearch.

Uses the duckduckgo_search library for free, keyless web searches.  The
library's synchronous ``DDGS`` client is wrapped in ``asyncio.to_thread``
so execution does not block the event loop.  Rate-limit and transport
errors fail the search; they are not swallowed.
"""

from __future__ import annotations

import asyncio

import structlog
from duckduckgo_search import DDGS

from src.interfaces.query_search import DEFAULT_MAX_RESULTS, QuerySearch
from src.models.search import SearchResult
from src.utils.errors import QueryExecutionError

logger = structlog.get_logger(logger_name=__name__)


class DuckDuckGoSearch(QuerySearch):
    """One search against DuckDuckGo.

    DuckDuckGo requires no API key.  Items come back as ``title``/``href``/
    ``body`` dicts and are mapped onto :class:`SearchResult` directly.
    """

    engine_name = "duckduckgo"

    def __init__(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> None:
        super().__init__(query, max_results)

    async def _query_engine(self) -> list[SearchResult]:
        try:
            raw_results = await asyncio.to_thread(self._sync_search, self.query, self.max_results)
        except Exception as exc:  # noqa: BLE001 - DDG may rate-limit or fail
            raise QueryExecutionError(
                message=f"DuckDuckGo search for {self.query!r} failed: {exc}",
                provider_name=self.engine_name,
            ) from exc

        results: list[SearchResult] = []
        for item in raw_results or []:
            results.append(
                SearchResult(
                    query=self.query,
                    url=item.get("href", item.get("url", "")),
                    headline=item.get("title", ""),
                    summary=item.get("body", ""),
                )
            )

        logger.debug(
            "duckduckgo_search_complete",
            query=self.query,
            result_count=len(results),
        )
        return results[: self.max_results]

    @staticmethod
    def _sync_search(query: str, max_results: int) -> list[dict]:
        """Run the synchronous DDGS search (called via to_thread)."""
        with DDGS() as ddgs:
            return list(ddgs.text(query, max_results=max_results))
