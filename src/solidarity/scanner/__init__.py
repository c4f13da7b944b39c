"""Scanner: annotator and check pipeline."""

from solidarity.scanner.engine import annotate, annotate_files, check, skip_reason

__all__ = ["annotate", "annotate_files", "check", "skip_reason"]
