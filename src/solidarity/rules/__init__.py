"""Rule engine: models, rule set construction, line matching."""

from solidarity.rules.matcher import match, match_rule
from solidarity.rules.models import Rule, RuleMatch
from solidarity.rules.ruleset import MatchError, RuleSet, build_ruleset, compile_rule

__all__ = [
    "MatchError",
    "Rule",
    "RuleMatch",
    "RuleSet",
    "build_ruleset",
    "compile_rule",
    "match",
    "match_rule",
]
