"""Web search engine implementations of QuerySearch.

``SEARCH_ENGINES`` maps the engine names accepted in configuration
(``SEARCH_ENGINE``) and on the command line to their search classes.
"""

from src.providers.search.bing_search import DEFAULT_BING_URL_TEMPLATE, BingSearch
from src.providers.search.duckduckgo_search import DuckDuckGoSearch

SEARCH_ENGINES = {
    BingSearch.engine_name: BingSearch,
    DuckDuckGoSearch.engine_name: DuckDuckGoSearch,
}

__all__ = ["DEFAULT_BING_URL_TEMPLATE", "SEARCH_ENGINES", "BingSearch", "DuckDuckGoSearch"]
