"""Search result models.

Plain immutable value objects passed from the scanner workers to the
caller: a Line, the ContextBlock built around one match, and the
FileResult collecting all blocks of one file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Line:
    """One line of text with its 1-based line number."""

    number: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "text": self.text}


@dataclass(frozen=True)
class ContextBlock:
    """A matched line plus up to N lines of context on each side.

    ``before`` and ``after`` may be shorter than the context size at file
    boundaries or when the block was merged with an adjacent one.
    """

    matched_line: Line
    before: tuple[Line, ...] = ()
    after: tuple[Line, ...] = ()

    def lines(self) -> tuple[Line, ...]:
        """All lines of the block in file order."""
        return (*self.before, self.matched_line, *self.after)

    def to_dict(self) -> dict[str, Any]:
        return {
            "before": [line.to_dict() for line in self.before],
            "matched_line": self.matched_line.to_dict(),
            "after": [line.to_dict() for line in self.after],
        }


@dataclass(frozen=True)
class FileResult:
    """All context blocks found in one file, in line order."""

    path: str
    blocks: tuple[ContextBlock, ...] = field(default_factory=tuple)

    @property
    def match_count(self) -> int:
        return len(self.blocks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "blocks": [block.to_dict() for block in self.blocks],
        }
