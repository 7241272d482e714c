"""Integration tests for the search -> history -> restart flow.

Runs real engine classes (Bing against an ``httpx.MockTransport``) through
:func:`run_search` into a file-backed :class:`SearchHistory`, then reopens
the file to check that queries, results, timestamps and click counts
survive a restart.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from src.main import build_history, build_search, run_search
from src.services.search_history import SearchHistory
from src.utils.errors import QueryExecutionError


def _bing_config(history_path) -> dict:
    return {
        "search": {"engine": "bing", "max_results": 10, "timeout": 5.0},
        "bing": {"account_key": "test-key"},
        "history": {"path": str(history_path)},
    }


@pytest.mark.asyncio
async def test_bing_searches_survive_restart(history_path, bing_payload) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=bing_payload))
    config = _bing_config(history_path)

    async with httpx.AsyncClient(transport=transport) as client:
        history = build_history(config)
        first = await run_search(build_search(None, "acid house", app_config=config, http_client=client), history)
        second = await run_search(
            build_search(None, "tb-303", 1, app_config=config, http_client=client), history
        )

    first.results[1].increment_click_counter()
    history.save()

    reopened = SearchHistory(history_path)
    assert [s.query for s in reopened.entries] == ["acid house", "tb-303"]
    assert [s.get_provider_name() for s in reopened.entries] == ["bing", "bing"]
    assert reopened.entries[0].timestamp == first.timestamp
    assert [r.url for r in reopened.entries[0].results] == [
        "https://en.wikipedia.org/wiki/Acid_house",
        "https://ra.co/features/1234",
    ]
    assert reopened.entries[0].results[1].click_count == 1
    assert len(reopened.entries[1].results) == 1

    window = reopened.get_history_date_ordered(
        second.timestamp - timedelta(microseconds=1), second.timestamp
    )
    assert [s.query for s in window] == ["tb-303"]
    assert reopened.get_recent_searches(1)[0].query == "tb-303"


@pytest.mark.asyncio
async def test_failed_search_between_successes_is_not_recorded(history_path, bing_payload) -> None:
    responses = iter(
        [
            httpx.Response(200, json=bing_payload),
            httpx.Response(503),
            httpx.Response(200, json=bing_payload),
        ]
    )
    transport = httpx.MockTransport(lambda request: next(responses))
    config = _bing_config(history_path)
    history = build_history(config)

    async with httpx.AsyncClient(transport=transport) as client:
        await run_search(build_search(None, "one", app_config=config, http_client=client), history)
        with pytest.raises(QueryExecutionError, match="HTTP 503"):
            await run_search(build_search(None, "two", app_config=config, http_client=client), history)
        await run_search(build_search(None, "three", app_config=config, http_client=client), history)

    assert [s.query for s in SearchHistory(history_path).entries] == ["one", "three"]


@pytest.mark.asyncio
async def test_history_grows_across_sessions(history_path, fake_search_cls) -> None:
    for session in range(3):
        history = SearchHistory(history_path)
        assert len(history) == session
        await run_search(fake_search_cls(f"session {session}"), history)

    final = SearchHistory(history_path)
    timestamps = [s.timestamp for s in final.entries]
    assert timestamps == sorted(timestamps)
    assert final.get_history_date_ordered() == final.entries
