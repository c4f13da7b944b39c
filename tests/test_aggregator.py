"""Tests for level ordering and aggregation."""

import pytest

from solidarity.annotations.aggregator import aggregate, count_by_level
from solidarity.annotations.models import Annotation
from solidarity.config.schema import Level


def _annotation(level: Level, line: int = 1) -> Annotation:
    return Annotation(
        path="a.py",
        start_line=line,
        end_line=line,
        level=level,
        title="t",
        message="m",
        raw_details="{}",
        rule="r",
    )


class TestLevel:
    def test_total_order(self):
        assert Level.OFF < Level.NOTICE < Level.WARNING < Level.FAILURE

    def test_parse(self):
        assert Level.parse("Warning") is Level.WARNING
        assert Level.parse(" failure ") is Level.FAILURE
        assert Level.parse(Level.NOTICE) is Level.NOTICE

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="unknown level"):
            Level.parse("error")

    def test_label(self):
        assert Level.NOTICE.label == "notice"
        assert str(Level.FAILURE) == "failure"


class TestAggregate:
    def test_empty_is_off(self):
        assert aggregate([]) is Level.OFF

    def test_single(self):
        assert aggregate([_annotation(Level.NOTICE)]) is Level.NOTICE

    def test_maximum(self):
        levels = [Level.NOTICE, Level.FAILURE, Level.WARNING]
        assert aggregate(_annotation(l) for l in levels) is Level.FAILURE

    @pytest.mark.parametrize("current", [Level.NOTICE, Level.WARNING])
    def test_adding_higher_level_raises_aggregate(self, current):
        annotations = [_annotation(current)]
        higher = Level(current + 1)
        assert aggregate(annotations + [_annotation(higher)]) is higher

    def test_removing_maximal_level_never_raises(self):
        annotations = [_annotation(l) for l in (Level.NOTICE, Level.FAILURE, Level.WARNING)]
        before = aggregate(annotations)
        remaining = [a for a in annotations if a.level is not before]
        assert aggregate(remaining) <= before
        assert aggregate(remaining) is Level.WARNING

    def test_off_is_identity(self):
        assert aggregate([_annotation(Level.OFF), _annotation(Level.NOTICE)]) is Level.NOTICE


class TestCountByLevel:
    def test_counts(self):
        annotations = [_annotation(Level.WARNING), _annotation(Level.WARNING), _annotation(Level.NOTICE)]
        assert count_by_level(annotations) == {
            Level.FAILURE: 0,
            Level.WARNING: 2,
            Level.NOTICE: 1,
        }

    def test_order_highest_first(self):
        assert list(count_by_level([])) == [Level.FAILURE, Level.WARNING, Level.NOTICE]
