"""Custom exception hierarchy for searchtrail.

All application exceptions inherit from :class:`SearchTrailError`, which
carries an optional ``provider_name`` so error handlers can identify which
search engine (e.g. "bing", "duckduckgo") caused the failure.

The hierarchy is organized by the stage that fails:

    SearchTrailError  (base -- catch-all for any searchtrail error)
    +-- InvalidUrlError       (result parsing: malformed result URL)
    +-- MissingFieldError     (result parsing: provider record lacks a field)
    +-- QueryExecutionError   (search execution: request/transport/parse)
    +-- HistoryLoadError      (history: existing log cannot be decoded)
    +-- HistoryWriteError     (history: flushing the log to disk failed)
    +-- ConfigurationError    (startup / missing credential / unknown engine)

None of these is treated as process-fatal; the host application decides
whether to abort or continue.
"""


class SearchTrailError(Exception):
    """Base exception for all searchtrail errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which search engine triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[bing] HTTP 503 from search API``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Result parsing errors
# ---------------------------------------------------------------------------

class InvalidUrlError(SearchTrailError):
    """Raised when a search result is built with a malformed or relative URL."""

    def __init__(
        self,
        message: str = "Result URL is not a well-formed absolute URL",
        provider_name: str | None = None,
        url: str | None = None,
    ) -> None:
        self._url = url
        super().__init__(message=message, provider_name=provider_name)

    @property
    def url(self) -> str | None:
        return self._url


class MissingFieldError(SearchTrailError):
    """Raised when a provider record lacks one of ``Url``, ``Title`` or ``Description``."""

    def __init__(
        self,
        message: str = "Provider record is missing a required field",
        provider_name: str | None = None,
        field_name: str | None = None,
    ) -> None:
        self._field_name = field_name
        super().__init__(message=message, provider_name=provider_name)

    @property
    def field_name(self) -> str | None:
        return self._field_name


# ---------------------------------------------------------------------------
# Search execution errors
# ---------------------------------------------------------------------------

class QueryExecutionError(SearchTrailError):
    """Raised when a search engine request, transport or response parse fails.

    Surfaced from :meth:`QuerySearch.execute`.  The underlying exception,
    when there is one, is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Search execution failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# History persistence errors
# ---------------------------------------------------------------------------

class HistoryLoadError(SearchTrailError):
    """Raised when an existing history file cannot be read or decoded.

    History construction fails instead of silently starting empty, since
    starting empty would overwrite the old log on the next append.
    """

    def __init__(
        self,
        message: str = "Search history could not be loaded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class HistoryWriteError(SearchTrailError):
    """Raised when the history log could not be flushed to disk.

    The entry that triggered the flush is not part of the history
    afterwards.
    """

    def __init__(
        self,
        message: str = "Search history could not be written",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(SearchTrailError):
    """Raised when configuration is invalid or missing (credentials, engine name)."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
