"""Data models for parsed unified diffs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single line inside a hunk.

    ``new_line_no`` is set for added and context lines, ``old_line_no`` for
    removed and context lines.
    """

    line_type: LineType
    content: str
    new_line_no: Optional[int] = None
    old_line_no: Optional[int] = None

    @property
    def is_added(self) -> bool:
        return self.line_type is LineType.ADDED


@dataclass(frozen=True)
class DiffHunk:
    """One ``@@ -a,b +c,d @@`` block and its lines, in patch order."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[DiffLine, ...] = ()

    def added_lines(self) -> Iterator[DiffLine]:
        return (line for line in self.lines if line.is_added)


@dataclass(frozen=True)
class DiffFile:
    """Everything the diff says about one file."""

    path: str
    old_path: Optional[str] = None  # set on renames and copies
    hunks: Tuple[DiffHunk, ...] = ()
    is_binary: bool = False
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False

    @property
    def is_scannable(self) -> bool:
        """Binary and deleted files carry no new text."""
        return not (self.is_binary or self.is_deleted)

    def added_lines(self) -> Iterator[DiffLine]:
        for hunk in self.hunks:
            yield from hunk.added_lines()
