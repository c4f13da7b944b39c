"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Literal, Optional, Union

from solidarity.config.defaults import DEFAULT_MESSAGE, DEFAULT_RULES


class Level(IntEnum):
    """Annotation severity, totally ordered ``OFF < NOTICE < WARNING < FAILURE``.

    ``OFF`` on a rule disables it; as an aggregate it means nothing was found.
    """

    OFF = 0
    NOTICE = 1
    WARNING = 2
    FAILURE = 3

    @classmethod
    def parse(cls, value: Union[str, "Level"]) -> "Level":
        """Accept a member or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            names = ", ".join(level.label for level in cls)
            raise ValueError(f"unknown level {value!r} (expected one of: {names})") from None

    @property
    def label(self) -> str:
        return self.name.lower()

    def __str__(self) -> str:
        return self.label


class MatchMode(str, Enum):
    """How a rule pattern must sit inside the scanned text."""

    WORD = "word"  # not glued to neighbouring letters
    SUBSTRING = "substring"  # anywhere, including inside identifiers

    @classmethod
    def parse(cls, value: Union[str, "MatchMode"]) -> "MatchMode":
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower().replace("-", "_")
        if normalised in ("whole_word", "word"):
            return cls.WORD
        if normalised == "substring":
            return cls.SUBSTRING
        raise ValueError(f"unknown match mode {value!r} (expected 'word' or 'substring')")


LEVEL_NAMES = tuple(level.label for level in Level)
OutputFormat = Literal["terminal", "json", "sarif", "checks"]
OUTPUT_FORMATS = ("terminal", "json", "sarif", "checks")


@dataclass
class RuleConfig:
    """One rule as written in configuration. Validated by ``build_ruleset``."""

    name: str
    patterns: List[str] = field(default_factory=list)
    level: str = "warning"
    alternatives: List[str] = field(default_factory=list)
    mode: str = "word"
    message: str = DEFAULT_MESSAGE

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "RuleConfig":
        rule = cls(name=name)
        rule.update(data)
        return rule

    def update(self, data: Dict[str, Any]) -> None:
        """Overlay the keys present in *data*; ``pattern`` is a one-item ``patterns``."""
        if "pattern" in data:
            self.patterns = [data["pattern"]]
        if "patterns" in data:
            patterns = data["patterns"]
            self.patterns = [patterns] if isinstance(patterns, str) else list(patterns)
        if "level" in data:
            self.level = str(data["level"])
        if "alternatives" in data:
            alternatives = data["alternatives"]
            self.alternatives = [alternatives] if isinstance(alternatives, str) else list(alternatives)
        if "mode" in data:
            self.mode = str(data["mode"])
        if "message" in data:
            self.message = str(data["message"])


def default_rules() -> Dict[str, RuleConfig]:
    """Fresh copies of the documented default rules."""
    return {name: RuleConfig.from_dict(name, data) for name, data in DEFAULT_RULES.items()}


@dataclass
class IgnoreConfig:
    paths: List[str] = field(default_factory=list)  # fnmatch globs


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class CheckConfig:
    fail_on: str = "failure"  # exit non-zero at or above this level
    max_annotations: Optional[int] = 50  # per check run; None = unlimited
    annotation_format: Literal["github", "none"] = "none"


@dataclass
class SolidarityConfig:
    version: str = "1.0"
    rules: Dict[str, RuleConfig] = field(default_factory=default_rules)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    check: CheckConfig = field(default_factory=CheckConfig)
