"""
walkgrep - concurrent recursive text search with context windows

Scans directory trees with pools of worker threads, matches every line of
every file against a regular expression and reports the matched lines with a
bounded window of surrounding context.
"""

import logging

__version__ = "0.1.0"

from .core import ContextBlock, FileResult, Line
from .core.pipeline import SearchOutcome, SearchRun, run_search, start

# Library code never configures handlers; applications do.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ContextBlock",
    "FileResult",
    "Line",
    "SearchOutcome",
    "SearchRun",
    "run_search",
    "start",
]
