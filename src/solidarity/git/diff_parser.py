"""Unified diff parser.

Turns ``git diff`` (or plain ``diff -u``) output into ``DiffFile`` objects
whose hunks carry old/new line numbers for every line. Handles BOM, CRLF,
binary markers, renames, copies, mode-only changes, ``\\ No newline`` markers,
``format-patch`` mail headers and hunk headers with omitted counts.

Malformed input raises ``ParseError``. There is no partial recovery: a diff
we only half understood could hide added lines from the scan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Set

from solidarity.git.models import DiffFile, DiffHunk, DiffLine, LineType

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_DIFF_HEADER_QUOTED_RE = re.compile(r'^diff --git "a/(.*)" "b/(.*)"$')
_DIFF_HEADER_NO_PREFIX_RE = re.compile(r"^diff --git (\S+) (\S+)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_GIT_BINARY_PATCH = "GIT binary patch"
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_COPY_FROM_RE = re.compile(r"^copy from (.+)$")
_COPY_TO_RE = re.compile(r"^copy to (.+)$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode \d+$")
_NEW_FILE_RE = re.compile(r"^new file mode \d+$")
_IGNORED_HEADERS = (
    re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+"),
    re.compile(r"^(?:dis)?similarity index \d+%$"),
    re.compile(r"^old mode \d+$"),
    re.compile(r"^new mode \d+$"),
)
_OLD_FILE_HEADER = "--- "
_NEW_FILE_HEADER = "+++ "
_DEV_NULL = "/dev/null"
_SIGNATURE_SEPARATOR = "--"  # format-patch trailer


class ParseError(ValueError):
    """Raised when text cannot be read as a unified diff."""

    def __init__(self, message: str, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


def _strip_bom(text: str) -> str:
    """Remove UTF-8 BOM if present."""
    return text.lstrip("\ufeff")


def _header_path(value: str, prefix: str) -> Optional[str]:
    """Path from a ``---``/``+++`` header, or None for /dev/null."""
    value = value.split("\t", 1)[0].rstrip()
    if value == _DEV_NULL:
        return None
    if value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    if value.startswith(prefix):
        value = value[len(prefix):]
    return value


@dataclass
class _PendingHunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header_line: int
    old_left: int = 0
    new_left: int = 0
    old_no: int = 0
    new_no: int = 0
    lines: List[DiffLine] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.old_left = self.old_count
        self.new_left = self.new_count
        self.old_no = self.old_start
        self.new_no = self.new_start

    @property
    def is_open(self) -> bool:
        return self.old_left > 0 or self.new_left > 0

    def freeze(self) -> DiffHunk:
        return DiffHunk(
            old_start=self.old_start,
            old_count=self.old_count,
            new_start=self.new_start,
            new_count=self.new_count,
            lines=tuple(self.lines),
        )


@dataclass
class _PendingFile:
    path: Optional[str]
    old_path: Optional[str]
    start_line: int
    is_binary: bool = False
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False
    is_copied: bool = False
    has_file_headers: bool = False
    hunks: List[DiffHunk] = field(default_factory=list)

    @property
    def accepts_headers(self) -> bool:
        """Extended headers are only legal before ``---``/``+++`` and hunks."""
        return not self.has_file_headers and not self.hunks

    def freeze(self) -> DiffFile:
        path = self.path if self.path is not None else self.old_path
        if path is None:
            raise ParseError("file header names no path", self.start_line)
        keep_old = self.is_renamed or self.is_copied
        return DiffFile(
            path=path,
            old_path=self.old_path if keep_old else None,
            hunks=tuple(self.hunks),
            is_binary=self.is_binary,
            is_new=self.is_new,
            is_deleted=self.is_deleted,
            is_renamed=self.is_renamed,
        )


class DiffParser:
    """Parse unified diff text into a list of ``DiffFile``.

    Usage::

        files = DiffParser(diff_text).parse()
        for diff_file in files:
            for line in diff_file.added_lines():
                ...
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = _strip_bom(diff_text).splitlines()

    def parse(self) -> List[DiffFile]:
        """Return one ``DiffFile`` per touched file, in document order."""
        self._files: List[DiffFile] = []
        self._seen: Set[str] = set()
        self._file: Optional[_PendingFile] = None
        self._hunk: Optional[_PendingHunk] = None
        self._in_binary_patch = False

        idx = 0
        total = len(self._lines)
        while idx < total:
            line_no = idx + 1
            line = self._lines[idx].rstrip("\r")
            idx += 1

            # --- Hunk body: counts in the header say how many lines follow ---
            if self._hunk is not None and self._hunk.is_open:
                self._consume_hunk_line(line, line_no)
                continue

            if line.startswith("diff --git "):
                self._start_git_file(line, line_no)
                continue

            # base85 payload of a binary patch runs until the next file
            if self._in_binary_patch:
                continue

            # --- "\ No newline at end of file" ---
            if line.startswith("\\"):
                continue

            if line.startswith("@@"):
                self._start_hunk(line, line_no)
                continue

            if line.startswith(_OLD_FILE_HEADER):
                next_line = self._lines[idx].rstrip("\r") if idx < total else ""
                if next_line.startswith(_NEW_FILE_HEADER):
                    self._file_headers(line, next_line, line_no)
                    idx += 1
                    continue
                if self._file is not None:
                    raise ParseError(f"'---' header without '+++': {line!r}", line_no)
                continue  # mail preamble

            if self._file is None:
                continue  # free text before the first file

            if line.rstrip() == _SIGNATURE_SEPARATOR:
                break

            if not line.strip():
                continue

            if self._file.accepts_headers and self._extended_header(line):
                continue

            raise ParseError(f"unexpected line outside of a hunk: {line!r}", line_no)

        if self._hunk is not None and self._hunk.is_open:
            raise ParseError(
                f"diff ends inside the hunk starting at line {self._hunk.header_line}"
            )
        self._finish_file()
        return self._files

    # ---- file level ----

    def _start_git_file(self, line: str, line_no: int) -> None:
        self._finish_file()
        m = (
            _DIFF_HEADER_RE.match(line)
            or _DIFF_HEADER_QUOTED_RE.match(line)
            or _DIFF_HEADER_NO_PREFIX_RE.match(line)
        )
        if m is None:
            raise ParseError(f"malformed file header: {line!r}", line_no)
        self._file = _PendingFile(path=m.group(2), old_path=m.group(1), start_line=line_no)

    def _file_headers(self, old_line: str, new_line: str, line_no: int) -> None:
        old_path = _header_path(old_line[len(_OLD_FILE_HEADER):], "a/")
        new_path = _header_path(new_line[len(_NEW_FILE_HEADER):], "b/")
        if old_path is None and new_path is None:
            raise ParseError("both file headers point at /dev/null", line_no)

        if self._file is None or not self._file.accepts_headers:
            # plain unified diff: ---/+++ opens the next file
            self._finish_file()
            self._file = _PendingFile(path=new_path, old_path=old_path, start_line=line_no)
        elif not (self._file.is_renamed or self._file.is_copied):
            self._file.path = new_path if new_path is not None else self._file.path
            self._file.old_path = old_path if old_path is not None else self._file.old_path

        self._file.has_file_headers = True
        if old_path is None:
            self._file.is_new = True
        if new_path is None:
            self._file.is_deleted = True

    def _extended_header(self, line: str) -> bool:
        """Apply a git extended header line. Return False if *line* is not one."""
        current = self._file
        assert current is not None
        if any(p.match(line) for p in _IGNORED_HEADERS):
            return True
        if _NEW_FILE_RE.match(line):
            current.is_new = True
            return True
        if _DELETED_FILE_RE.match(line):
            current.is_deleted = True
            return True
        if m := _RENAME_FROM_RE.match(line):
            current.old_path = m.group(1)
            current.is_renamed = True
            return True
        if m := _RENAME_TO_RE.match(line):
            current.path = m.group(1)
            current.is_renamed = True
            return True
        if m := _COPY_FROM_RE.match(line):
            current.old_path = m.group(1)
            current.is_copied = True
            return True
        if m := _COPY_TO_RE.match(line):
            current.path = m.group(1)
            current.is_copied = True
            return True
        if _BINARY_RE.match(line):
            current.is_binary = True
            return True
        if line == _GIT_BINARY_PATCH:
            current.is_binary = True
            self._in_binary_patch = True
            return True
        return False

    def _finish_file(self) -> None:
        self._finish_hunk()
        self._in_binary_patch = False
        if self._file is None:
            return
        diff_file = self._file.freeze()
        self._file = None
        if diff_file.path in self._seen:
            raise ParseError(f"file appears more than once in the diff: {diff_file.path}")
        self._seen.add(diff_file.path)
        self._files.append(diff_file)

    # ---- hunk level ----

    def _start_hunk(self, line: str, line_no: int) -> None:
        m = _HUNK_HEADER_RE.match(line)
        if m is None:
            raise ParseError(f"malformed hunk header: {line!r}", line_no)
        if self._file is None:
            raise ParseError("hunk header before any file header", line_no)
        if self._file.is_binary:
            raise ParseError("text hunk in a binary file", line_no)
        self._finish_hunk()

        old_count = int(m.group(2)) if m.group(2) is not None else 1
        new_count = int(m.group(4)) if m.group(4) is not None else 1
        self._hunk = _PendingHunk(
            old_start=int(m.group(1)),
            old_count=old_count,
            new_start=int(m.group(3)),
            new_count=new_count,
            header_line=line_no,
        )

    def _consume_hunk_line(self, line: str, line_no: int) -> None:
        hunk = self._hunk
        assert hunk is not None
        marker, content = line[:1], _strip_bom(line[1:])

        if marker == "+":
            if hunk.new_left == 0:
                raise ParseError("more added lines than the hunk header declares", line_no)
            hunk.lines.append(
                DiffLine(LineType.ADDED, content, new_line_no=hunk.new_no)
            )
            hunk.new_no += 1
            hunk.new_left -= 1
        elif marker == "-":
            if hunk.old_left == 0:
                raise ParseError("more removed lines than the hunk header declares", line_no)
            hunk.lines.append(
                DiffLine(LineType.REMOVED, content, old_line_no=hunk.old_no)
            )
            hunk.old_no += 1
            hunk.old_left -= 1
        elif marker in (" ", ""):
            # some tools strip the space from empty context lines
            if hunk.old_left == 0 or hunk.new_left == 0:
                raise ParseError("more context lines than the hunk header declares", line_no)
            hunk.lines.append(
                DiffLine(
                    LineType.CONTEXT,
                    content,
                    new_line_no=hunk.new_no,
                    old_line_no=hunk.old_no,
                )
            )
            hunk.new_no += 1
            hunk.old_no += 1
            hunk.new_left -= 1
            hunk.old_left -= 1
        elif marker == "\\":
            pass
        else:
            raise ParseError(
                f"hunk from line {hunk.header_line} ends early: expected "
                f"{hunk.old_left} old and {hunk.new_left} new lines, got {line!r}",
                line_no,
            )

    def _finish_hunk(self) -> None:
        if self._hunk is None:
            return
        assert self._file is not None
        self._file.hunks.append(self._hunk.freeze())
        self._hunk = None


def parse_diff(diff_text: str) -> List[DiffFile]:
    """Parse *diff_text*; see ``DiffParser``."""
    return DiffParser(diff_text).parse()
