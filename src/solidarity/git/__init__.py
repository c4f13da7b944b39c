"""Diff source and unified diff parsing."""

from solidarity.git.adapter import GitError, get_range_diff, get_repo_root, get_staged_diff
from solidarity.git.diff_parser import DiffParser, ParseError, parse_diff
from solidarity.git.models import DiffFile, DiffHunk, DiffLine, LineType

__all__ = [
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffParser",
    "GitError",
    "LineType",
    "ParseError",
    "get_range_diff",
    "get_repo_root",
    "get_staged_diff",
    "parse_diff",
]
