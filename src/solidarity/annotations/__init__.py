"""Annotation model and level aggregation."""

from solidarity.annotations.aggregator import aggregate, count_by_level
from solidarity.annotations.models import Annotation, CheckResult

__all__ = ["Annotation", "CheckResult", "aggregate", "count_by_level"]
