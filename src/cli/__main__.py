# =============================================================================
# src/cli/__main__.py — Package Entry Point
# =============================================================================
#
# Enables running the CLI package itself as a module:
#     python -m src.cli "some query"
#
# Delegates to the search tool, the most common operation.  For the history
# browser run it directly:
#     python -m src.cli.history list --recent 10
# =============================================================================

"""Allow ``python -m src.cli`` execution."""

import sys

from src.cli.search import main

sys.exit(main())
