"""Unit tests for the wiring functions in src/main.py.

Covers engine selection in build_search, history construction in
build_history and the execute-then-record flow of run_search, all
without network access.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from src.main import build_history, build_search, run_search
from src.providers.search import BingSearch, DuckDuckGoSearch
from src.services.search_history import SearchHistory
from src.utils.errors import ConfigurationError, QueryExecutionError


def _config(**sections) -> dict:
    """Resolved-config dictionary with test defaults."""
    config = {
        "search": {"engine": "duckduckgo", "max_results": 10, "timeout": 15.0},
        "bing": {"account_key": "", "url_template": ""},
        "history": {"path": "history.ser"},
    }
    for name, values in sections.items():
        config[name] = {**config.get(name, {}), **values}
    return config


# ======================================================================
# build_search
# ======================================================================


class TestBuildSearch:
    def test_default_engine_from_config(self) -> None:
        search = build_search(None, "acid house", app_config=_config())
        assert isinstance(search, DuckDuckGoSearch)
        assert search.max_results == 10

    def test_engine_argument_wins(self) -> None:
        config = _config(bing={"account_key": "k"})
        search = build_search("bing", "acid house", app_config=config)
        assert isinstance(search, BingSearch)

    def test_engine_name_is_case_insensitive(self) -> None:
        assert isinstance(build_search("DuckDuckGo", "q", app_config=_config()), DuckDuckGoSearch)

    def test_max_results_argument_wins(self) -> None:
        config = _config(search={"max_results": 20})
        assert build_search(None, "q", app_config=config).max_results == 20
        assert build_search(None, "q", 4, app_config=config).max_results == 4

    def test_unknown_engine_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="altavista"):
            build_search("altavista", "q", app_config=_config())

    def test_bing_without_key_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_search("bing", "q", app_config=_config())
        assert exc_info.value.provider_name == "bing"

    def test_bing_uses_configured_template_and_client(self) -> None:
        client = MagicMock(spec=httpx.AsyncClient)
        config = _config(
            search={"engine": "bing", "max_results": 5},
            bing={"account_key": "k", "url_template": "https://bing.test/?q={query}&n={top}"},
        )

        search = build_search(None, "rave flyers", app_config=config, http_client=client)

        assert isinstance(search, BingSearch)
        assert search.build_request_url() == "https://bing.test/?q=rave+flyers&n=5"
        assert search._client is client

    def test_config_loaded_when_not_given(self) -> None:
        with patch("src.main.load_config", return_value=_config()) as loader:
            build_search(None, "q")
        loader.assert_called_once_with()


# ======================================================================
# build_history
# ======================================================================


class TestBuildHistory:
    def test_path_argument_wins(self, history_path: Path) -> None:
        history = build_history(_config(), str(history_path))
        assert isinstance(history, SearchHistory)
        assert history.storage_path == history_path

    def test_configured_path(self, history_path: Path) -> None:
        history = build_history(_config(history={"path": str(history_path)}))
        assert history.storage_path == history_path
        assert history_path.exists()


# ======================================================================
# run_search
# ======================================================================


class TestRunSearch:
    @pytest.mark.asyncio
    async def test_records_successful_search(self, history_path, fake_search_cls) -> None:
        history = SearchHistory(history_path)
        search = fake_search_cls("detroit", hits=2)

        returned = await run_search(search, history)

        assert returned is search
        assert [(s.query, s.timestamp) for s in history.entries] == [(search.query, search.timestamp)]
        assert len(SearchHistory(history_path)) == 1

    @pytest.mark.asyncio
    async def test_without_history_only_executes(self, fake_search_cls) -> None:
        search = fake_search_cls("detroit")
        await run_search(search)
        assert search.calls == 1
        assert len(search.results) == 3

    @pytest.mark.asyncio
    async def test_failed_search_not_recorded(self, history_path, fake_search_cls) -> None:
        history = SearchHistory(history_path)
        search = fake_search_cls("q", error=RuntimeError("offline"))

        with pytest.raises(QueryExecutionError):
            await run_search(search, history)

        assert len(history) == 0
