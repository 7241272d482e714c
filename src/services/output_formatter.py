"""Structured output formatting for searches and history slices.

Transforms :class:`QuerySearch` objects into clean JSON-serialisable
dictionaries and plain-text reports for the command-line tools.  Two
output modes are supported:

- **Full** — every result with its headline, URL, summary and click count.
- **Summary** — one line per search (timestamp, engine, query, hit count),
  used when listing history.
"""

from __future__ import annotations

from typing import Any

from src.interfaces.query_search import QuerySearch
from src.models.search import SearchResult
from src.utils.logging import get_logger

_SEPARATOR = "=" * 60


class OutputFormatter:
    """Turns searches into dictionaries and text.

    All ``format_*`` methods returning dicts produce plain JSON-compatible
    values (timestamps are ISO-8601 strings).
    """

    def __init__(self, summary_width: int = 160) -> None:
        self._logger = get_logger(__name__)
        self._summary_width = summary_width

    # ------------------------------------------------------------------
    # Dictionaries
    # ------------------------------------------------------------------

    def format_result(self, result: SearchResult) -> dict[str, Any]:
        return {
            "headline": result.headline,
            "url": result.url,
            "summary": result.summary,
            "click_count": result.click_count,
        }

    def format_search(self, search: QuerySearch, index: int | None = None) -> dict[str, Any]:
        """Return the full dictionary form of *search*."""
        payload: dict[str, Any] = {
            "engine": search.get_provider_name(),
            "query": search.query,
            "max_results": search.max_results,
            "timestamp": search.timestamp.isoformat() if search.timestamp else None,
            "state": search.state.value,
            "results": [self.format_result(r) for r in search.results],
        }
        if index is not None:
            payload["index"] = index
        return payload

    def format_history(self, searches: list[QuerySearch], offset: int = 0) -> list[dict[str, Any]]:
        """Return dictionaries for a history slice, numbered from *offset*."""
        formatted = [self.format_search(s, index=offset + i) for i, s in enumerate(searches)]
        self._logger.debug("history_formatted", entry_count=len(formatted))
        return formatted

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def format_search_text(self, search: QuerySearch) -> str:
        """Render *search* as a numbered, human-readable result list."""
        lines = [
            _SEPARATOR,
            f"  {search.query}  [{search.get_provider_name()}]",
            _SEPARATOR,
        ]
        results = search.results
        if not results:
            lines.append("  (no results)")
        for position, result in enumerate(results):
            lines.append(f"[{position}] {result.headline}")
            lines.append(f"    {result.url}")
            if result.summary:
                lines.append(f"    {self._shorten(result.summary)}")
            if result.click_count:
                lines.append(f"    opened {result.click_count}x")
        return "\n".join(lines)

    def format_history_text(self, searches: list[QuerySearch], offset: int = 0) -> str:
        """Render a history slice as one line per search."""
        if not searches:
            return "No searches in history."
        lines: list[str] = []
        for i, search in enumerate(searches):
            when = search.timestamp.strftime("%Y-%m-%d %H:%M:%S") if search.timestamp else "-"
            lines.append(
                f"{offset + i:>4}  {when}  {search.get_provider_name():<10}  "
                f"{len(search.results):>3} hits  {search.query}"
            )
        return "\n".join(lines)

    def _shorten(self, text: str) -> str:
        text = " ".join(text.split())
        if len(text) <= self._summary_width:
            return text
        return text[: self._summary_width - 3].rstrip() + "..."
