"""Search result value object shared by every search engine.

A :class:`SearchResult` is created once per hit while a provider parses its
response.  Its descriptive fields are read-only after construction; the
visit counter is the only mutable state and is bumped by the presentation
layer through :meth:`SearchResult.increment_click_counter`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import AnyUrl, TypeAdapter, ValidationError

from src.models.history import SearchResultRecord
from src.utils.errors import InvalidUrlError, MissingFieldError

# pydantic's AnyUrl rejects relative references and host-less http(s) URLs,
# which is exactly the "well-formed absolute URL" rule for result links.
_URL_ADAPTER = TypeAdapter(AnyUrl)

# Field names used by provider records (Bing Search API "d.results" items).
_RECORD_URL = "Url"
_RECORD_TITLE = "Title"
_RECORD_DESCRIPTION = "Description"

_READ_ONLY_FIELDS = frozenset({"query", "url", "headline", "summary", "click_count"})


def validate_absolute_url(url: str) -> str:
    """Return *url* unchanged if it is a well-formed absolute URL.

    Raises
    ------
    InvalidUrlError
        If *url* is not a string or does not parse as an absolute URL.
    """
    if not isinstance(url, str):
        raise InvalidUrlError(message=f"Result URL must be a string, got {type(url).__name__}", url=None)
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError as exc:
        raise InvalidUrlError(
            message=f"Malformed result URL {url!r}: {exc.errors()[0]['msg']}",
            url=url,
        ) from exc
    return url


@dataclass(eq=True)
class SearchResult:
    """A single hit returned by a search engine for a query.

    Attributes
    ----------
    query:
        The query string that produced this result.
    url:
        Absolute URL of the result page, kept exactly as the engine sent it.
    headline:
        The page title as returned by the engine.
    summary:
        The engine-generated description/snippet.
    click_count:
        How many times the user opened this result.  Starts at 0 and never
        decreases.
    """

    query: str
    url: str
    headline: str
    summary: str
    click_count: int = 0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        validate_absolute_url(self.url)
        if self.click_count < 0:
            raise ValueError(f"click_count must be non-negative, got {self.click_count}")

    def __setattr__(self, name: str, value: Any) -> None:
        # Fields are assigned once, by the dataclass __init__; click_count then
        # only moves through increment_click_counter.
        if name in _READ_ONLY_FIELDS and name in self.__dict__:
            raise AttributeError(f"SearchResult.{name} is read-only")
        super().__setattr__(name, value)

    @classmethod
    def from_provider_record(
        cls,
        query: str,
        record: Mapping[str, Any],
        provider_name: str | None = None,
    ) -> SearchResult:
        """Build a result from a provider's structured record.

        The record must carry string ``Url``, ``Title`` and ``Description``
        fields.

        Raises
        ------
        MissingFieldError
            If one of the three fields is absent or null.
        InvalidUrlError
            If ``Url`` is not a well-formed absolute URL.
        """
        values: dict[str, str] = {}
        for name in (_RECORD_URL, _RECORD_TITLE, _RECORD_DESCRIPTION):
            value = record.get(name)
            if value is None:
                raise MissingFieldError(
                    message=f"Provider record has no {name!r} field",
                    provider_name=provider_name,
                    field_name=name,
                )
            values[name] = str(value)

        try:
            return cls(
                query=query,
                url=values[_RECORD_URL],
                headline=values[_RECORD_TITLE],
                summary=values[_RECORD_DESCRIPTION],
            )
        except InvalidUrlError as exc:
            raise InvalidUrlError(
                message=exc.message, provider_name=provider_name, url=exc.url
            ) from exc

    def increment_click_counter(self) -> None:
        """Record one visit of this result."""
        with self._lock:
            super().__setattr__("click_count", self.click_count + 1)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_record(self) -> SearchResultRecord:
        """Snapshot this result into its persisted form."""
        return SearchResultRecord(
            query=self.query,
            url=self.url,
            headline=self.headline,
            summary=self.summary,
            click_count=self.click_count,
        )

    @classmethod
    def from_record(cls, record: SearchResultRecord) -> SearchResult:
        """Rebuild a result (including its click count) from a persisted record."""
        return cls(
            query=record.query,
            url=record.url,
            headline=record.headline,
            summary=record.summary,
            click_count=record.click_count,
        )
