# =============================================================================
# src/cli/search.py — CLI Search Command (Execute + Record)
# =============================================================================
#
# Runs one web search from the command line, prints the results and appends
# the completed search to the history file:
#
#   python -m src.cli.search rave flyers 1994                  # default engine
#   python -m src.cli.search "acid house" --engine bing -n 5   # Bing, 5 hits
#   python -m src.cli.search techno --json --no-record         # JSON, no history
#
# Engine, result cap and history path default to the resolved configuration
# (config/config.yaml + environment, see src/config/loader.py).  Log lines go
# to stderr; --json implies --quiet so stdout carries only the JSON document.
# =============================================================================

"""Standalone CLI that executes a search and records it in the history.

Usage::

    python -m src.cli.search QUERY... [--engine NAME] [--max-results N]
                             [--history PATH] [--config PATH]
                             [--json] [--no-record] [--quiet]

Exits with code 0 on success and 1 when the search, the configuration or
the history store fails.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from src.config.loader import DEFAULT_CONFIG_PATH, load_config
from src.main import build_history, build_search, run_search
from src.services.output_formatter import OutputFormatter
from src.utils.errors import SearchTrailError
from src.utils.logging import configure_logging


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


async def _run(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Execute the search described by *args* and print it."""
    query = " ".join(args.query).strip()
    if not query:
        print("Error: empty query", file=sys.stderr)
        return 1

    try:
        search = build_search(args.engine, query, args.max_results, app_config=config)
        history = None if args.no_record else build_history(config, args.history)
        await run_search(search, history)
    except SearchTrailError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    formatter = OutputFormatter()
    if args.json_output:
        print(json.dumps(formatter.format_search(search), indent=2, ensure_ascii=False))
    else:
        print(formatter.format_search_text(search))
    if history is not None:
        print(f"Recorded in {history.storage_path} ({len(history)} searches)", file=sys.stderr)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the search CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.search",
        description="Run a web search and record it in the search history.",
    )
    parser.add_argument("query", nargs="+", help="Query text (multiple words are joined).")
    parser.add_argument("--engine", "-e", default=None, help="Search engine (bing, duckduckgo).")
    parser.add_argument(
        "--max-results", "-n", type=_positive_int, default=None,
        help="Maximum number of results (default from config, 10).",
    )
    parser.add_argument("--history", default=None, help="History file (default from config).")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML config file.")
    parser.add_argument("--json", dest="json_output", action="store_true", help="Print JSON.")
    parser.add_argument("--no-record", action="store_true", help="Do not append to history.")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors.")
    parser.add_argument("--log-level", default=None, help="Log level (default from config, INFO).")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the search tool; returns the process exit code."""
    args = _build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except SearchTrailError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # JSON mode implies quiet; log lines never mix into the JSON document.
    quiet = args.quiet or args.json_output
    level = args.log_level or config.get("logging", {}).get("level", "INFO")
    configure_logging(
        log_level="WARNING" if quiet else level,
        app_env=config.get("app", {}).get("env"),
    )

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
