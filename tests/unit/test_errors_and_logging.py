"""Unit tests for the exception hierarchy and logging setup."""

from __future__ import annotations

import io
import json
import logging

import pytest
import structlog

from src.utils.errors import (
    ConfigurationError,
    HistoryLoadError,
    HistoryWriteError,
    InvalidUrlError,
    MissingFieldError,
    QueryExecutionError,
    SearchTrailError,
)
from src.utils.logging import configure_logging, get_logger


class TestErrors:
    @pytest.mark.parametrize(
        "error_cls",
        [
            InvalidUrlError,
            MissingFieldError,
            QueryExecutionError,
            HistoryLoadError,
            HistoryWriteError,
            ConfigurationError,
        ],
    )
    def test_all_errors_share_base(self, error_cls) -> None:
        error = error_cls()
        assert isinstance(error, SearchTrailError)
        assert error.message
        assert error.provider_name is None

    def test_provider_prefix(self) -> None:
        error = QueryExecutionError("HTTP 503 from Bing", provider_name="bing")
        assert str(error) == "[bing] HTTP 503 from Bing"
        assert error.message == "HTTP 503 from Bing"

    def test_no_prefix_without_provider(self) -> None:
        assert str(HistoryWriteError("disk full")) == "disk full"

    def test_extra_attributes(self) -> None:
        assert InvalidUrlError(url="nope").url == "nope"
        assert MissingFieldError(field_name="Title").field_name == "Title"


class TestLogging:
    @pytest.fixture(autouse=True)
    def _restore(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)
        structlog.reset_defaults()

    def test_json_lines_go_to_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(log_level="INFO", json_output=True, stream=stream)

        get_logger("searchtrail.test").info("history_loaded", entry_count=3)

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "history_loaded"
        assert record["entry_count"] == 3
        assert record["level"] == "info"
        assert record["logger_name"] == "searchtrail.test"

    def test_level_filters(self) -> None:
        stream = io.StringIO()
        configure_logging(log_level="WARNING", json_output=True, stream=stream)

        log = get_logger("searchtrail.test")
        log.info("dropped")
        log.warning("kept")

        assert "dropped" not in stream.getvalue()
        assert "kept" in stream.getvalue()

    def test_stdlib_records_share_the_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(log_level="INFO", json_output=True, stream=stream)

        logging.getLogger("httpx").info("HTTP Request: GET https://x.test")

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "HTTP Request: GET https://x.test"

    def test_app_env_argument_selects_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_ENV", raising=False)
        stream = io.StringIO()
        configure_logging(log_level="INFO", stream=stream, app_env="production")

        get_logger("searchtrail.test").info("search_executed", result_count=2)

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "search_executed"
