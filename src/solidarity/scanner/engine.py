"""Annotator and check pipeline.

``annotate`` walks parsed files, restricted to added lines, and turns every
rule match into an ``Annotation``. ``check`` runs the whole pipeline on raw
diff text. Errors from parsing and rule construction propagate unchanged.
"""

from __future__ import annotations

import json
import logging
import time
from fnmatch import fnmatch
from typing import Iterable, List, Optional, Sequence

from solidarity.annotations.aggregator import aggregate
from solidarity.annotations.models import Annotation, CheckResult
from solidarity.config.schema import SolidarityConfig
from solidarity.git.diff_parser import parse_diff
from solidarity.git.models import DiffFile, DiffLine
from solidarity.rules.matcher import match
from solidarity.rules.models import RuleMatch
from solidarity.rules.ruleset import RuleSet, build_ruleset

logger = logging.getLogger(__name__)


def skip_reason(diff_file: DiffFile, ignore_globs: Sequence[str]) -> Optional[str]:
    """Why *diff_file* is not scanned, or None if it is."""
    if diff_file.is_binary:
        return "binary"
    if diff_file.is_deleted:
        return "deleted"
    if any(fnmatch(diff_file.path, g) for g in ignore_globs):
        return "ignored"
    return None


def _annotation(path: str, line: DiffLine, hit: RuleMatch) -> Annotation:
    assert line.new_line_no is not None
    rule = hit.rule
    details = {
        "rule": rule.name,
        "line": line.content,
        "match": hit.text,
        "span": [hit.start, hit.end],
    }
    return Annotation(
        path=path,
        start_line=line.new_line_no,
        end_line=line.new_line_no,
        level=rule.level,
        title=rule.render(hit.text),
        message=(
            f"Found `{hit.text}` at column {hit.start + 1} "
            f"(rule '{rule.name}', level {rule.level.label})."
        ),
        raw_details=json.dumps(details),
        rule=rule.name,
        start_column=hit.start + 1,
        end_column=hit.end,
    )


def annotate_files(
    ruleset: RuleSet,
    files: Iterable[DiffFile],
    ignore_globs: Sequence[str] = (),
) -> List[Annotation]:
    """Annotate added lines of *files* with an already built *ruleset*.

    Output order is file, line, rule, then position within the line.
    """
    annotations: List[Annotation] = []
    for diff_file in files:
        reason = skip_reason(diff_file, ignore_globs)
        if reason is not None:
            logger.debug("skipping %s (%s)", diff_file.path, reason)
            continue
        for line in diff_file.added_lines():
            for hit in match(ruleset, line.content):
                annotations.append(_annotation(diff_file.path, line, hit))
    return annotations


def annotate(config: SolidarityConfig, files: Iterable[DiffFile]) -> List[Annotation]:
    """Build the rule set from *config* and annotate the added lines of *files*."""
    return annotate_files(build_ruleset(config), files, config.ignore.paths)


def check(diff_text: str, config: SolidarityConfig) -> CheckResult:
    """Parse, annotate and aggregate *diff_text*. Returns a CheckResult."""
    start = time.perf_counter()

    ruleset = build_ruleset(config)
    files = parse_diff(diff_text)

    scanned: List[str] = []
    skipped: List[str] = []
    for diff_file in files:
        reason = skip_reason(diff_file, config.ignore.paths)
        if reason is None:
            scanned.append(diff_file.path)
        else:
            skipped.append(f"{diff_file.path} ({reason})")

    annotations = annotate_files(ruleset, files, config.ignore.paths)
    level = aggregate(annotations)

    elapsed = (time.perf_counter() - start) * 1000
    logger.debug(
        "%d annotations in %d files, level %s, %.1fms",
        len(annotations), len(scanned), level.label, elapsed,
    )
    return CheckResult(
        annotations=annotations,
        level=level,
        scanned_files=scanned,
        skipped_files=skipped,
        duration_ms=round(elapsed, 2),
    )
