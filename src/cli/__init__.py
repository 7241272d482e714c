# =============================================================================
# src/cli/__init__.py — CLI Module Overview
# =============================================================================
#
# Standalone command-line tools for searchtrail.  Each submodule is a
# self-contained CLI that can be run via `python -m src.cli.<module>`:
#
#   1. SEARCH  (search.py)
#      Executes one query against the configured engine, prints the
#      results and appends the completed search to the history file.
#
#   2. HISTORY (history.py)
#      Lists past searches (most recent N or a date range), shows the
#      results of one search and opens a result in the web browser,
#      counting the click.
#
# Architecture Notes:
#   - argparse for argument parsing.
#   - Both tools resolve configuration through src.config.loader and build
#     their collaborators through the factories in src.main.
#   - Errors from the core (SearchTrailError) become exit code 1 with the
#     message on stderr.
# =============================================================================

"""CLI tools for searchtrail.

- ``python -m src.cli.search`` — run a search and record it.
- ``python -m src.cli.history`` — browse history and open results.
"""
