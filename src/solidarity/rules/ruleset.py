"""Rule set: configuration validated into compiled rules, once per run."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from solidarity.config.schema import Level, MatchMode, RuleConfig, SolidarityConfig
from solidarity.rules.models import Rule

logger = logging.getLogger(__name__)

MAX_PATTERN_LENGTH = 256

# A quantified group that itself contains a quantifier, e.g. (a+)+ or (\w*x)*
_NESTED_QUANTIFIER_RE = re.compile(r"\((?:[^()\\]|\\.)*[*+}](?:[^()\\]|\\.)*\)[*+{]")

# Word mode: letters glued together are one word, except at a lower-to-upper
# case change, so ``isMaster`` splits while ``mastermind`` does not.
_CAMEL_SPLIT = r"(?-i:(?<=[a-z])(?=[A-Z]))"
_WORD_START = rf"(?:(?<![^\W\d_])|{_CAMEL_SPLIT})"
_WORD_END = rf"(?:(?![^\W\d_])|{_CAMEL_SPLIT})"


class MatchError(ValueError):
    """Raised when a rule cannot be turned into a safe matcher."""

    def __init__(self, rule_name: str, reason: str) -> None:
        self.rule_name = rule_name
        super().__init__(f"rule {rule_name!r}: {reason}")


@dataclass(frozen=True)
class RuleSet:
    """Active rules in evaluation order. Disabled rules are not members."""

    rules: Tuple[Rule, ...] = ()

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None


def _check_pattern(name: str, pattern: str) -> None:
    if not isinstance(pattern, str) or not pattern:
        raise MatchError(name, "patterns must be non-empty strings")
    if len(pattern) > MAX_PATTERN_LENGTH:
        raise MatchError(name, f"pattern longer than {MAX_PATTERN_LENGTH} characters")
    if _NESTED_QUANTIFIER_RE.search(pattern):
        raise MatchError(name, f"nested quantifiers can backtrack catastrophically: {pattern!r}")


def compile_rule(config: RuleConfig) -> Rule:
    """Validate one rule definition. Raises MatchError."""
    name = config.name
    try:
        level = Level.parse(config.level)
        mode = MatchMode.parse(config.mode)
    except ValueError as exc:
        raise MatchError(name, str(exc)) from exc

    if not config.patterns:
        raise MatchError(name, "no patterns")
    for pattern in config.patterns:
        _check_pattern(name, pattern)

    source = "|".join(f"(?:{p})" for p in config.patterns)
    try:
        bare = re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise MatchError(name, f"invalid regular expression: {exc}") from exc
    if bare.search("") is not None:
        raise MatchError(name, "pattern matches the empty string")
    # word boundaries are part of the pattern, not a filter on its spans
    compiled = bare
    if mode is MatchMode.WORD:
        compiled = re.compile(f"{_WORD_START}(?:{source}){_WORD_END}", re.IGNORECASE)

    rule = Rule(
        name=name,
        pattern=compiled,
        patterns=tuple(config.patterns),
        level=level,
        suggestions=tuple(str(s) for s in config.alternatives),
        mode=mode,
        message=config.message,
    )
    try:
        rule.render("")
    except (KeyError, IndexError, ValueError, AttributeError, TypeError) as exc:
        raise MatchError(name, f"bad message template: {exc!r}") from exc
    return rule


def build_ruleset(config: SolidarityConfig) -> RuleSet:
    """Compile every enabled rule of *config*, keeping configuration order.

    Rules at level ``off`` are validated like the rest but left out.
    """
    rules: List[Rule] = []
    for rule_config in config.rules.values():
        rule = compile_rule(rule_config)
        if rule.level is Level.OFF:
            logger.debug("rule %s is off", rule.name)
            continue
        rules.append(rule)
    logger.debug("%d of %d rules active", len(rules), len(config.rules))
    return RuleSet(tuple(rules))
