"""Annotation data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from solidarity.config.schema import Level


@dataclass(frozen=True)
class Annotation:
    """One flagged occurrence, anchored on an added line of the new file."""

    path: str
    start_line: int
    end_line: int
    level: Level
    title: str
    message: str
    raw_details: str  # JSON: line text, matched span, rule name
    rule: str
    start_column: Optional[int] = None  # 1-based, inclusive
    end_column: Optional[int] = None


@dataclass
class CheckResult:
    """Complete result of one check run."""

    annotations: List[Annotation] = field(default_factory=list)
    level: Level = Level.OFF
    scanned_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)  # "path (reason)"
    duration_ms: float = 0.0

    @property
    def total_annotations(self) -> int:
        return len(self.annotations)
