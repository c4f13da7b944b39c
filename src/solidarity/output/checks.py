"""Check-run reporting: level → conclusion, check output payload, workflow commands.

The payload mirrors the GitHub Checks API ``output`` object. The API takes
at most 50 annotations per request, so truncation lives here and nowhere
in the scanner.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from solidarity import __version__
from solidarity.annotations.aggregator import count_by_level
from solidarity.annotations.models import Annotation, CheckResult
from solidarity.config.schema import Level

CHECK_NAME = "Inclusive Language"


class Conclusion(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"


class OutputTitle(str, Enum):
    SUCCESS = "Check completed with success"
    ERROR = "Check failed due to error"
    FAILURE = "Check completed with failures"
    NOTICE = "Check completed with notices"
    WARNING = "Check completed with warnings"


_CONCLUSIONS: Dict[Level, Tuple[Conclusion, OutputTitle]] = {
    Level.FAILURE: (Conclusion.ACTION_REQUIRED, OutputTitle.FAILURE),
    Level.WARNING: (Conclusion.NEUTRAL, OutputTitle.WARNING),
    Level.NOTICE: (Conclusion.NEUTRAL, OutputTitle.NOTICE),
    Level.OFF: (Conclusion.SUCCESS, OutputTitle.SUCCESS),
}

# Checks API annotation_level vocabulary
_ANNOTATION_LEVEL = {
    Level.NOTICE: "notice",
    Level.WARNING: "warning",
    Level.FAILURE: "failure",
}

# GitHub Actions workflow command names
_WORKFLOW_COMMAND = {
    Level.NOTICE: "notice",
    Level.WARNING: "warning",
    Level.FAILURE: "error",
}


def conclusion_for(level: Level) -> Tuple[Conclusion, OutputTitle]:
    """Map an aggregate level onto the check conclusion and output title."""
    return _CONCLUSIONS[level]


def render_summary(result: Optional[CheckResult], message: str = "") -> str:
    """Markdown summary shown above the annotations."""
    lines = [f"## {CHECK_NAME}", ""]
    if message:
        lines += [message, ""]
    if result is not None:
        counts = count_by_level(result.annotations)
        lines += [
            f"Scanned {len(result.scanned_files)} file(s), "
            f"skipped {len(result.skipped_files)}.",
            "",
            "| Level | Annotations |",
            "| --- | --- |",
        ]
        lines += [f"| {level.label} | {n} |" for level, n in counts.items()]
        lines.append("")
    sha = os.environ.get("GITHUB_SHA") or os.environ.get("SHA")
    footer = f"in-solidarity {__version__}"
    if sha:
        footer += f" at `{sha}`"
    lines.append(f"_{footer}_")
    return "\n".join(lines)


def annotation_payload(annotation: Annotation) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "path": annotation.path,
        "start_line": annotation.start_line,
        "end_line": annotation.end_line,
        "annotation_level": _ANNOTATION_LEVEL[annotation.level],
        "title": annotation.title,
        "message": annotation.message,
        "raw_details": annotation.raw_details,
    }
    # columns are only accepted on single-line annotations
    if annotation.start_line == annotation.end_line and annotation.start_column:
        payload["start_column"] = annotation.start_column
        payload["end_column"] = annotation.end_column
    return payload


def build_check_output(
    result: CheckResult,
    max_annotations: Optional[int] = 50,
) -> Dict[str, Any]:
    """Check-run ``conclusion`` plus ``output`` for *result*."""
    conclusion, title = conclusion_for(result.level)
    kept = result.annotations
    message = ""
    if max_annotations is not None and len(kept) > max_annotations:
        message = f"Showing the first {max_annotations} of {len(kept)} annotations."
        kept = kept[:max_annotations]
    return {
        "name": CHECK_NAME,
        "conclusion": conclusion.value,
        "output": {
            "title": title.value,
            "summary": render_summary(result, message),
            "annotations": [annotation_payload(a) for a in kept],
        },
    }


def error_output(message: str, *, config_error: bool = False) -> Dict[str, Any]:
    """Check output for a run that never produced annotations.

    A broken configuration is the repository's fault and fails the check;
    anything else cancels it.
    """
    conclusion = Conclusion.FAILURE if config_error else Conclusion.CANCELLED
    return {
        "name": CHECK_NAME,
        "conclusion": conclusion.value,
        "output": {
            "title": OutputTitle.ERROR.value,
            "summary": render_summary(None, message),
        },
    }


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def workflow_commands(
    annotations: List[Annotation],
    max_annotations: Optional[int] = None,
) -> List[str]:
    """GitHub Actions ``::warning file=...`` lines for *annotations*."""
    if max_annotations is not None:
        annotations = annotations[:max_annotations]
    commands: List[str] = []
    for a in annotations:
        props = [
            f"file={_escape_property(a.path)}",
            f"line={a.start_line}",
            f"endLine={a.end_line}",
        ]
        if a.start_column:
            props += [f"col={a.start_column}", f"endColumn={a.end_column}"]
        props.append(f"title={_escape_property(a.title)}")
        commands.append(
            f"::{_WORKFLOW_COMMAND[a.level]} {','.join(props)}::{_escape_data(a.message)}"
        )
    return commands
