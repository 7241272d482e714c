"""Persisted, append-only log of executed searches.

The whole log lives in memory as a list of :class:`QuerySearch` objects and
on disk as a single JSON document (see :mod:`src.models.history`).  Every
append rewrites the whole file; the write goes to a temporary sibling file
that is then moved over the old one, so the last successful flush is what
survives a crash.

Entries are trusted to be appended in chronological order (each search is
recorded right after it ran).  The range query relies on that ordering and
uses binary search rather than re-sorting.
"""

from __future__ import annotations

import bisect
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import ValidationError

from src.interfaces.query_search import QuerySearch, StoredSearch
from src.models.history import HISTORY_FORMAT_VERSION, HistoryDocument
from src.utils.errors import HistoryLoadError, HistoryWriteError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_HISTORY_PATH = Path("history.ser")


def _as_utc(moment: datetime) -> datetime:
    """Interpret naive datetimes as UTC so they compare with stored timestamps."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _timestamp_of(search: QuerySearch) -> datetime:
    # Entries are only accepted once executed, so the timestamp is always set.
    return _as_utc(search.timestamp)  # type: ignore[arg-type]


class SearchHistory:
    """Durable, time-ordered history of searches.

    Parameters
    ----------
    path:
        Location of the history file.  Created (empty) if it does not exist.

    Raises
    ------
    HistoryLoadError
        If the file exists but cannot be read or decoded.
    """

    def __init__(self, path: str | Path = DEFAULT_HISTORY_PATH) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()
        self._entries: list[QuerySearch] = []
        self.load()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def storage_path(self) -> Path:
        return self._path

    @property
    def entries(self) -> list[QuerySearch]:
        """All entries in chronological order (a copy of the log)."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> list[QuerySearch]:
        """(Re)load the log from :attr:`storage_path`, replacing the in-memory entries.

        A missing file is created empty.  An empty file is an empty history.
        """
        with self._lock:
            if not self._path.exists():
                try:
                    self._path.parent.mkdir(parents=True, exist_ok=True)
                    self._path.touch()
                except OSError as exc:
                    raise HistoryLoadError(
                        message=f"Cannot create history file {self._path}: {exc}"
                    ) from exc
                self._entries = []
                logger.info("history_created", path=str(self._path))
                return []

            try:
                raw = self._path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise HistoryLoadError(
                    message=f"Cannot read history file {self._path}: {exc}"
                ) from exc

            if not raw.strip():
                self._entries = []
                logger.info("history_loaded", path=str(self._path), entry_count=0)
                return []

            try:
                document = HistoryDocument.model_validate_json(raw)
                entries: list[QuerySearch] = [
                    StoredSearch.from_record(record) for record in document.entries
                ]
            except (ValidationError, ValueError) as exc:
                raise HistoryLoadError(
                    message=f"History file {self._path} is corrupt: {exc}"
                ) from exc

            if document.version > HISTORY_FORMAT_VERSION:
                raise HistoryLoadError(
                    message=(
                        f"History file {self._path} has format version {document.version}; "
                        f"this build reads up to {HISTORY_FORMAT_VERSION}"
                    )
                )

            self._entries = entries
            logger.info("history_loaded", path=str(self._path), entry_count=len(entries))
            return list(entries)

    def save(self) -> None:
        """Flush the whole log to :attr:`storage_path`.

        Called by :meth:`add_entry`; call it directly after click counters
        changed so they survive a restart.

        Raises
        ------
        HistoryWriteError
            If the file could not be written.
        """
        with self._lock:
            document = HistoryDocument(
                entries=[search.to_record() for search in self._entries],
            )
            payload = document.model_dump_json(indent=2)
            self._write_atomic(payload)
            logger.debug("history_saved", path=str(self._path), entry_count=len(self._entries))

    def _write_atomic(self, payload: str) -> None:
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise HistoryWriteError(
                message=f"Cannot write history file {self._path}: {exc}"
            ) from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("history_tmp_cleanup_failed", path=tmp_name)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_entry(self, search: QuerySearch) -> None:
        """Append *search* to the log and flush the log to disk.

        The search must have been executed.  The log keeps a
        :class:`StoredSearch` snapshot of it, so executing *search* again
        later leaves the recorded entry untouched.  If the flush fails the entry
        is removed again and :class:`HistoryWriteError` is raised, so the
        in-memory log never holds entries that are not on disk.

        Raises
        ------
        ValueError
            If *search* has never been executed.
        HistoryWriteError
            If the log could not be written.
        """
        if search.timestamp is None:
            raise ValueError(f"Cannot record search {search.query!r}: it has not been executed")
        entry = StoredSearch.snapshot(search)

        with self._lock:
            self._entries.append(entry)
            try:
                self.save()
            except HistoryWriteError:
                self._entries.pop()
                logger.error(
                    "history_entry_not_persisted",
                    path=str(self._path),
                    query=search.query,
                )
                raise

        logger.info(
            "history_entry_added",
            query=search.query,
            engine=search.get_provider_name(),
            result_count=len(search.results),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_recent_searches(self, n: int) -> list[QuerySearch]:
        """Return the ``min(n, len(history))`` most recent searches, oldest first."""
        with self._lock:
            if n <= 0 or not self._entries:
                return []
            return list(self._entries[-n:])

    def get_history_date_ordered(
        self,
        begin: datetime | None = None,
        end: datetime | None = None,
    ) -> list[QuerySearch]:
        """Return the searches whose timestamp lies in ``[begin, end]``.

        ``begin=None`` means "from the first entry", ``end=None`` means
        "until now".  Naive datetimes are taken to be UTC.  An inverted
        range (``begin > end``) yields an empty list.
        """
        with self._lock:
            if not self._entries:
                return []
            if begin is None and end is None:
                return list(self._entries)

            upper = _as_utc(end) if end is not None else datetime.now(tz=timezone.utc)
            if begin is not None:
                lower = _as_utc(begin)
                if lower > upper:
                    return []
                first = bisect.bisect_left(self._entries, lower, key=_timestamp_of)
            else:
                first = 0
            last = bisect.bisect_right(self._entries, upper, key=_timestamp_of)
            return list(self._entries[first:last])
