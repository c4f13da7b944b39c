"""Git subprocess wrapper: the diff source for local and CI runs."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

# context lines are never scanned, so ask git for none
_DIFF_ARGS = ["--unified=0", "--no-color", "--find-renames"]


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: List[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    logger.debug("running git %s in %s", " ".join(args), cwd)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise GitError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git {' '.join(args)} timed out after {timeout}s") from exc

    if result.returncode != 0:
        raise GitError(f"git {args[0]} failed: {result.stderr.strip() or result.returncode}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the enclosing git repository."""
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd or Path.cwd())
    return Path(out.strip())


def get_staged_diff(repo_root: Path) -> str:
    """Unified diff of the index against HEAD."""
    return _run_git(["diff", "--cached", *_DIFF_ARGS], cwd=repo_root)


def get_range_diff(repo_root: Path, base: str, head: str = "HEAD") -> str:
    """Unified diff of the changes a pull request introduces.

    Uses the three-dot form so commits that landed on *base* after the
    branch point are not attributed to the change.
    """
    return _run_git(["diff", f"{base}...{head}", *_DIFF_ARGS], cwd=repo_root)
