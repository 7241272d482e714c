# =============================================================================
# src/cli/history.py — CLI History Browser
# =============================================================================
#
# Lists past searches and opens their results:
#
#   python -m src.cli.history                          # every search
#   python -m src.cli.history list --recent 5          # last five searches
#   python -m src.cli.history list --since 2024-05-01 --until 2024-05-31
#   python -m src.cli.history show 3                   # results of search #3
#   python -m src.cli.history open 3 0                 # open result 0 of #3
#
# Entry numbers are positions in the full history (0 = oldest) and stay
# stable whichever listing printed them.  "open" launches the default web
# browser, bumps the result's click counter and saves the history; a
# browser failure is reported and leaves the counter untouched.
# =============================================================================

"""Standalone CLI for browsing the search history.

Usage::

    python -m src.cli.history [list] [--recent N | --since ISO --until ISO] [--json]
    python -m src.cli.history show ENTRY [--json]
    python -m src.cli.history open ENTRY RESULT

``--since``/``--until`` accept ISO-8601 dates or datetimes; values without
a UTC offset are taken as UTC.
"""

from __future__ import annotations

import argparse
import json
import sys
import webbrowser
from datetime import datetime

from src.config.loader import DEFAULT_CONFIG_PATH, load_config
from src.main import build_history
from src.services.output_formatter import OutputFormatter
from src.services.search_history import SearchHistory
from src.utils.errors import SearchTrailError
from src.utils.logging import configure_logging, get_logger


def _iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 date/time: {value}") from exc


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or positive, got {value}")
    return number


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_list(history: SearchHistory, args: argparse.Namespace, formatter: OutputFormatter) -> int:
    if args.recent is not None:
        searches = history.get_recent_searches(args.recent)
    else:
        searches = history.get_history_date_ordered(args.since, args.until)

    # Number entries by their position in the full log.
    all_entries = history.entries
    offset = next((i for i, s in enumerate(all_entries) if searches and s is searches[0]), 0)

    if args.json_output:
        print(json.dumps(formatter.format_history(searches, offset), indent=2, ensure_ascii=False))
    else:
        print(formatter.format_history_text(searches, offset))
    return 0


def _cmd_show(history: SearchHistory, args: argparse.Namespace, formatter: OutputFormatter) -> int:
    entries = history.entries
    if args.entry >= len(entries):
        print(f"Error: no search #{args.entry} (history has {len(entries)})", file=sys.stderr)
        return 1
    search = entries[args.entry]
    if args.json_output:
        print(json.dumps(formatter.format_search(search, args.entry), indent=2, ensure_ascii=False))
    else:
        print(formatter.format_search_text(search))
    return 0


def _cmd_open(history: SearchHistory, args: argparse.Namespace, formatter: OutputFormatter) -> int:
    logger = get_logger(__name__)
    entries = history.entries
    if args.entry >= len(entries):
        print(f"Error: no search #{args.entry} (history has {len(entries)})", file=sys.stderr)
        return 1
    results = entries[args.entry].results
    if args.result >= len(results):
        print(
            f"Error: search #{args.entry} has no result {args.result} ({len(results)} results)",
            file=sys.stderr,
        )
        return 1

    result = results[args.result]
    try:
        opened = webbrowser.open(result.url)
    except webbrowser.Error as exc:
        logger.warning("browser_open_failed", url=result.url, error=str(exc))
        opened = False
    if not opened:
        print(f"Failed to open link in browser: {result.url}", file=sys.stderr)
        return 1

    result.increment_click_counter()
    history.save()
    print(f"Opened {result.url} (clicked {result.click_count}x)")
    return 0


_COMMANDS = {
    "list": _cmd_list,
    "show": _cmd_show,
    "open": _cmd_open,
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the history CLI."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--history", default=None, help="History file (default from config).")
    common.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML config file.")
    common.add_argument("--json", dest="json_output", action="store_true", help="Print JSON.")
    common.add_argument("--log-level", default="WARNING", help="Log level (default WARNING).")

    parser = argparse.ArgumentParser(
        prog="python -m src.cli.history",
        description="Browse the search history and open recorded results.",
    )
    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", parents=[common], help="List searches.")
    window = list_parser.add_mutually_exclusive_group()
    window.add_argument("--recent", type=_non_negative_int, default=None, help="Last N searches.")
    window.add_argument("--since", type=_iso_datetime, default=None, help="Earliest timestamp.")
    list_parser.add_argument("--until", type=_iso_datetime, default=None, help="Latest timestamp.")

    show_parser = subparsers.add_parser("show", parents=[common], help="Show one search's results.")
    show_parser.add_argument("entry", type=_non_negative_int, help="Search number.")

    open_parser = subparsers.add_parser("open", parents=[common], help="Open a result in the browser.")
    open_parser.add_argument("entry", type=_non_negative_int, help="Search number.")
    open_parser.add_argument("result", type=_non_negative_int, help="Result number.")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the history tool; returns the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)
    # Bare invocation (or leading options) means "list".
    if not argv or argv[0] not in (*_COMMANDS, "-h", "--help"):
        argv.insert(0, "list")
    args = _build_parser().parse_args(argv)
    if args.command == "list" and args.recent is not None and args.until is not None:
        print("Error: --until cannot be combined with --recent", file=sys.stderr)
        return 2

    try:
        config = load_config(args.config)
    except SearchTrailError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    configure_logging(log_level=args.log_level, app_env=config.get("app", {}).get("env"))

    try:
        history = build_history(config, args.history)
        return _COMMANDS[args.command](history, args, OutputFormatter())
    except SearchTrailError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
