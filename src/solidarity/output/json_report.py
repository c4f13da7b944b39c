"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from solidarity import __version__
from solidarity.annotations.aggregator import count_by_level
from solidarity.annotations.models import CheckResult
from solidarity.output.checks import conclusion_for


def to_dict(result: CheckResult) -> Dict[str, Any]:
    """Convert CheckResult to a JSON-serialisable dict."""
    annotations: List[Dict[str, Any]] = []
    for a in result.annotations:
        annotations.append({
            "path": a.path,
            "start_line": a.start_line,
            "end_line": a.end_line,
            "start_column": a.start_column,
            "end_column": a.end_column,
            "level": a.level.label,
            "rule": a.rule,
            "title": a.title,
            "message": a.message,
            "raw_details": json.loads(a.raw_details),
        })

    conclusion, _ = conclusion_for(result.level)
    return {
        "version": __version__,
        "level": result.level.label,
        "conclusion": conclusion.value,
        "total_annotations": result.total_annotations,
        "counts": {level.label: n for level, n in count_by_level(result.annotations).items()},
        "annotations": annotations,
        "scanned_files": result.scanned_files,
        "skipped_files": result.skipped_files,
        "duration_ms": result.duration_ms,
    }


def render(result: CheckResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
