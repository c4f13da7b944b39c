"""Rule data model: validated, compiled, read-only for the whole run."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from solidarity.config.defaults import DEFAULT_MESSAGE
from solidarity.config.schema import Level, MatchMode


@dataclass(frozen=True)
class Rule:
    """A single detection rule.

    ``pattern`` is compiled case-insensitively by ``build_ruleset``, with word
    boundaries built in for ``MatchMode.WORD``. A rule object never holds an
    uncompiled or unchecked expression.
    """

    name: str
    pattern: re.Pattern[str]
    level: Level
    suggestions: Tuple[str, ...] = ()
    mode: MatchMode = MatchMode.WORD
    message: str = DEFAULT_MESSAGE
    patterns: Tuple[str, ...] = ()  # as configured, before compilation

    def render(self, matched: str) -> str:
        """Fill the message template for one occurrence of *matched*."""
        return self.message.format(
            match=matched,
            rule=self.name,
            suggestions=", ".join(self.suggestions) or "none listed",
        )


@dataclass(frozen=True)
class RuleMatch:
    """One occurrence of ``rule`` at ``line[start:end]``."""

    rule: Rule
    start: int
    end: int
    text: str
