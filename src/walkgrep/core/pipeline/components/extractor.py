"""Streaming context extraction for walkgrep.

This module turns the lines of one file into ContextBlock objects while
holding at most ``context_size`` lines in memory:

- SlidingBuffer: bounded FIFO that evicts its oldest line when full
- ContextExtractor: the block-building state machine
- iter_lines: reads a file as validated UTF-8 lines
- extract_contexts: reads a file and runs the extractor over it

Merge rule: when a second match arrives while a block is still collecting
its after-context, the open block is closed with whatever has been
buffered so far and the new block starts with an empty ``before``. Two
close matches therefore yield two adjacent blocks that share no lines.
"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Iterable, Iterator

from walkgrep.core.models import ContextBlock, Line
from walkgrep.shared.constants import Encoding, FileLimits
from walkgrep.shared.errors import ErrorCode, ErrorContext, ScanError


class SlidingBuffer:
    """FIFO of at most ``capacity`` lines.

    Pushing into a full buffer evicts the oldest line first, so the length
    never exceeds the capacity.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            msg = "SlidingBuffer capacity must be positive"
            raise ValueError(msg)
        self._lines: deque[Line] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._lines.maxlen or 0

    def is_full(self) -> bool:
        return len(self._lines) == self.capacity

    def push(self, line: Line) -> None:
        self._lines.append(line)

    def drain_all(self) -> tuple[Line, ...]:
        """Remove and return every buffered line in insertion order."""
        lines = tuple(self._lines)
        self._lines.clear()
        return lines

    def reset(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)


class ContextExtractor:
    """Builds context blocks from a stream of (line, matched) pairs.

    A context size below 1 selects no-context mode: every matched line
    becomes a block with empty before/after and nothing is buffered.

    The extractor is reusable: :meth:`finish` returns the blocks of the
    current file and leaves the extractor ready for the next one.

    Args:
        context_size: Maximum number of lines kept on each side of a match.
    """

    def __init__(self, context_size: int) -> None:
        self.context_size = max(context_size, FileLimits.NO_CONTEXT)
        self._buffer = SlidingBuffer(self.context_size) if self.context_size else None
        self._blocks: list[ContextBlock] = []
        self._open_line: Line | None = None
        self._open_before: tuple[Line, ...] = ()

    @property
    def has_open_block(self) -> bool:
        return self._open_line is not None

    def feed(self, line: Line, matched: bool) -> None:
        """Process the next line of the file."""
        if self._buffer is None:
            if matched:
                self._blocks.append(ContextBlock(matched_line=line))
            return

        if self._open_line is None:
            if matched:
                self._open(line, self._buffer.drain_all())
                return
            self._buffer.push(line)
            return

        if matched:
            self._close()
            self._open(line, ())
            return

        if self._buffer.is_full():
            self._close()
        self._buffer.push(line)

    def finish(self) -> list[ContextBlock]:
        """Flush the open block and return all blocks of the file."""
        if self._open_line is not None:
            self._close()
        blocks = self._blocks
        self.reset()
        return blocks

    def reset(self) -> None:
        """Discard all state, e.g. after a file failed half-way."""
        self._blocks = []
        self._open_line = None
        self._open_before = ()
        if self._buffer is not None:
            self._buffer.reset()

    def _open(self, line: Line, before: tuple[Line, ...]) -> None:
        self._open_line = line
        self._open_before = before

    def _close(self) -> None:
        assert self._open_line is not None
        assert self._buffer is not None
        self._blocks.append(
            ContextBlock(
                matched_line=self._open_line,
                before=self._open_before,
                after=self._buffer.drain_all(),
            ),
        )
        self._open_line = None
        self._open_before = ()


def iter_lines(
    path: str,
    max_line_bytes: int = FileLimits.MAX_LINE_BYTES,
    *,
    max_line_number: int = FileLimits.MAX_LINE_NUMBER,
) -> Iterator[Line]:
    """Yield the lines of a file as validated UTF-8 text.

    Line terminators ("\\n", optionally preceded by "\\r") are stripped.

    Args:
        path: Absolute path of the file.
        max_line_bytes: Longest accepted line, terminator excluded.
        max_line_number: Highest line number that can be represented.

    Raises:
        ScanError: INVALID_ENCODING, LINE_TOO_LONG or TOO_MANY_LINES.
        OSError: If the file cannot be opened or read.
    """
    with open(path, "rb") as handle:
        number = 0
        while True:
            # Room for a full-length line plus its CRLF terminator
            raw = handle.readline(max_line_bytes + 2)
            if not raw:
                return

            number += 1
            if number > max_line_number:
                raise ScanError(
                    ErrorCode.TOO_MANY_LINES,
                    f"Too many lines in {path}",
                    path,
                    ErrorContext(
                        file_path=path,
                        operation="read_lines",
                        additional_data={"max_line_number": max_line_number},
                    ),
                )

            if raw.endswith(b"\n"):
                raw = raw[:-1]
                if raw.endswith(b"\r"):
                    raw = raw[:-1]
            elif len(raw) <= max_line_bytes and raw.endswith(b"\r"):
                raw = raw[:-1]

            if len(raw) > max_line_bytes:
                raise ScanError(
                    ErrorCode.LINE_TOO_LONG,
                    f"Line {number} of {path} exceeds {max_line_bytes} bytes",
                    path,
                    ErrorContext(
                        file_path=path,
                        operation="read_lines",
                        additional_data={
                            "line_number": number,
                            "max_line_bytes": max_line_bytes,
                        },
                    ),
                )

            try:
                text = raw.decode(Encoding.DEFAULT)
            except UnicodeDecodeError as e:
                raise ScanError(
                    ErrorCode.INVALID_ENCODING,
                    f"Invalid UTF-8 in {path} at line {number}",
                    path,
                    ErrorContext(
                        file_path=path,
                        operation="decode_line",
                        additional_data={"line_number": number},
                    ),
                    original_error=e,
                ) from e

            yield Line(number, text)


def extract_from_lines(
    lines: Iterable[Line],
    pattern: re.Pattern[str],
    extractor: ContextExtractor,
) -> list[ContextBlock]:
    """Run the extractor over already-split lines."""
    try:
        for line in lines:
            extractor.feed(line, pattern.search(line.text) is not None)
    except BaseException:
        extractor.reset()
        raise
    return extractor.finish()


def extract_contexts(
    path: str,
    pattern: re.Pattern[str],
    context_size: int,
    max_line_bytes: int = FileLimits.MAX_LINE_BYTES,
    extractor: ContextExtractor | None = None,
) -> list[ContextBlock]:
    """Read a file and return its context blocks in line order.

    Args:
        path: Absolute path of the file.
        pattern: Compiled pattern searched in every line.
        context_size: Lines of context on each side (below 1: none).
        max_line_bytes: Longest accepted line.
        extractor: Optional extractor to reuse across files; it must have
            been created with the same context size.

    Returns:
        The blocks of the file; empty when nothing matched.

    Raises:
        ScanError: For content errors (encoding, line length, line count).
        OSError: If the file cannot be opened or read.
    """
    if extractor is None:
        extractor = ContextExtractor(context_size)
    return extract_from_lines(iter_lines(path, max_line_bytes), pattern, extractor)
