"""Reduce annotations to one overall level."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from solidarity.annotations.models import Annotation
from solidarity.config.schema import Level


def aggregate(annotations: Iterable[Annotation]) -> Level:
    """Highest level present; ``Level.OFF`` when there are no annotations."""
    return max((a.level for a in annotations), default=Level.OFF)


def count_by_level(annotations: Iterable[Annotation]) -> Dict[Level, int]:
    """Annotation counts for every level above OFF, highest first."""
    counts = Counter(a.level for a in annotations)
    return {level: counts.get(level, 0) for level in sorted(Level, reverse=True) if level is not Level.OFF}
