"""searchtrail application wiring.

Builds engine searches and the history store from configuration, and runs
the "execute, then record" flow that every front end uses:

    search = build_search("bing", "rave flyers 1994", app_config=config)
    history = build_history(app_config=config)
    await run_search(search, history)

Configuration comes from :func:`src.config.loader.load_config` (YAML file
plus environment); callers may pass an already-resolved dictionary.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.config.loader import load_config
from src.interfaces.query_search import QuerySearch
from src.providers.search import SEARCH_ENGINES, BingSearch
from src.services.search_history import SearchHistory
from src.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def build_search(
    engine: str | None,
    query: str,
    max_results: int | None = None,
    app_config: dict[str, Any] | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> QuerySearch:
    """Instantiate a search for *query* on the named engine.

    ``engine`` and ``max_results`` fall back to the ``search`` section of
    the configuration when ``None``.

    Raises
    ------
    ConfigurationError
        If the engine name is unknown or its credentials are missing.
    """
    config = app_config if app_config is not None else load_config()
    search_cfg = config.get("search", {})
    engine_name = (engine or search_cfg.get("engine") or "duckduckgo").lower()
    cap = max_results if max_results is not None else int(search_cfg.get("max_results", 10))

    engine_cls = SEARCH_ENGINES.get(engine_name)
    if engine_cls is None:
        known = ", ".join(sorted(SEARCH_ENGINES))
        raise ConfigurationError(message=f"Unknown search engine {engine_name!r} (known: {known})")

    if engine_cls is BingSearch:
        bing_cfg = config.get("bing", {})
        kwargs: dict[str, Any] = {
            "account_key": bing_cfg.get("account_key", ""),
            "http_client": http_client,
            "timeout": float(search_cfg.get("timeout", 15.0)),
        }
        if bing_cfg.get("url_template"):
            kwargs["url_template"] = bing_cfg["url_template"]
        search = BingSearch(query, cap, **kwargs)
    else:
        search = engine_cls(query, cap)

    logger.debug("search_built", engine=engine_name, query=query, max_results=cap)
    return search


def build_history(
    app_config: dict[str, Any] | None = None,
    path: str | None = None,
) -> SearchHistory:
    """Open the history store at *path*, or at the configured ``history.path``."""
    if path is None:
        config = app_config if app_config is not None else load_config()
        path = config.get("history", {}).get("path", "history.ser")
    return SearchHistory(path)


async def run_search(search: QuerySearch, history: SearchHistory | None = None) -> QuerySearch:
    """Execute *search* and, on success, append it to *history*.

    Failed searches are not recorded; the :class:`QueryExecutionError`
    propagates to the caller.
    """
    await search.execute()
    if history is not None:
        history.add_entry(search)
    return search
