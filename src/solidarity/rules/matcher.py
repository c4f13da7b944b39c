"""Match one line of text against a rule set."""

from __future__ import annotations

from typing import Iterator, List

from solidarity.rules.models import Rule, RuleMatch
from solidarity.rules.ruleset import RuleSet


def match_rule(rule: Rule, text: str) -> Iterator[RuleMatch]:
    """Yield each non-overlapping occurrence of *rule* in *text*.

    Whole-word checks are compiled into ``rule.pattern``.
    """
    for m in rule.pattern.finditer(text):
        start, end = m.span()
        if start == end:
            continue
        yield RuleMatch(rule=rule, start=start, end=end, text=m.group(0))


def match(ruleset: RuleSet, text: str) -> List[RuleMatch]:
    """All matches of all rules, in rule order then position.

    Different rules hitting the same span are each reported.
    """
    matches: List[RuleMatch] = []
    for rule in ruleset:
        matches.extend(match_rule(rule, text))
    return matches
