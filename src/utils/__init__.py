"""Utility modules for searchtrail.

Available utility modules (re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at SearchTrailError;
  result parsing, search execution and history persistence each raise their
  own subclass so callers can handle failures granularly.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

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

__all__ = [
    "ConfigurationError",
    "HistoryLoadError",
    "HistoryWriteError",
    "InvalidUrlError",
    "MissingFieldError",
    "QueryExecutionError",
    "SearchTrailError",
    "configure_logging",
    "get_logger",
]
