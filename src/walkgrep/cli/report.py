"""Text rendering of search results.

Three layouts are supported:

- grouped (default): the path, then every block line, then a blank line
- inline (``--with-filename``): every block line prefixed with the path
- files (``--files-with-matches``): one path per matching file

Block lines are rendered as ``{n}:{text}`` for the matched line and
``{n}-{text}`` for context lines.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from enum import Enum

from walkgrep.core.models import ContextBlock, FileResult, Line
from walkgrep.shared.constants import ReportFormat


class ReportMode(str, Enum):
    """Layout of the text report."""

    GROUPED = "grouped"
    INLINE = "inline"
    FILES = "files"


def format_line(line: Line, *, matched: bool) -> str:
    separator = ReportFormat.MATCH_SEPARATOR if matched else ReportFormat.CONTEXT_SEPARATOR
    return f"{line.number}{separator}{line.text}"


def format_block(block: ContextBlock) -> list[str]:
    """Render one block in file order."""
    lines = [format_line(line, matched=False) for line in block.before]
    lines.append(format_line(block.matched_line, matched=True))
    lines.extend(format_line(line, matched=False) for line in block.after)
    return lines


def render_result(result: FileResult, mode: ReportMode = ReportMode.GROUPED) -> list[str]:
    """Render one FileResult as report lines (without trailing newlines)."""
    if mode is ReportMode.FILES:
        return [result.path]

    body = [line for block in result.blocks for line in format_block(block)]
    if mode is ReportMode.INLINE:
        prefix = f"{result.path}{ReportFormat.PATH_SEPARATOR}"
        return [prefix + line for line in body] + [""]
    return [result.path, *body, ""]


def matches_type(path: str, extensions: Iterable[str]) -> bool:
    """Check a path against an extension allow-list.

    An empty allow-list accepts every path. Extensions are compared
    case-insensitively and without the leading dot.
    """
    allowed = {ext.lower().lstrip(".") for ext in extensions}
    if not allowed:
        return True
    extension = os.path.splitext(path)[1].lower().lstrip(".")
    return extension in allowed


def filter_results(results: Iterable[FileResult], extensions: Iterable[str]) -> Iterator[FileResult]:
    """Drop results whose file extension is not in the allow-list."""
    allowed = [ext for ext in extensions if ext]
    for result in results:
        if matches_type(result.path, allowed):
            yield result
