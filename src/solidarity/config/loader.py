"""Load and merge configuration from .solidarity.toml, rule files and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from solidarity.config.schema import (
    LEVEL_NAMES,
    OUTPUT_FORMATS,
    CheckConfig,
    IgnoreConfig,
    Level,
    MatchMode,
    OutputConfig,
    RuleConfig,
    SolidarityConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".solidarity.toml"
RULES_DIRNAME = ".solidarity-rules"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in raw.items() if k in valid_fields})


def _merge_rules(rules: Dict[str, RuleConfig], entries: Dict[str, Any], source: str) -> None:
    """Overlay rule tables onto *rules*: known names are patched, new names added."""
    for name, entry in entries.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"{source}: rule {name!r} must be a table")
        if name in rules:
            rules[name].update(entry)
        else:
            rules[name] = RuleConfig.from_dict(name, entry)


def load_rule_files(directory: Path) -> Dict[str, Dict[str, Any]]:
    """Read YAML rule files from *directory*, keyed by rule name.

    Each document is a rule mapping with a ``name`` key, or a list of them.
    """
    entries: Dict[str, Dict[str, Any]] = {}
    if not directory.is_dir():
        return entries
    for path in sorted(directory.iterdir()):
        if path.suffix not in (".yaml", ".yml"):
            continue
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        if data is None:
            continue
        for entry in data if isinstance(data, list) else [data]:
            if not isinstance(entry, dict) or "name" not in entry:
                raise ConfigError(f"{path}: every rule needs a 'name'")
            entries[str(entry["name"])] = {k: v for k, v in entry.items() if k != "name"}
        logger.debug("loaded rule file %s", path)
    return entries


def _split_env(value: str, sep: str = ",") -> List[str]:
    return [part.strip() for part in value.split(sep) if part.strip()]


def _merge_env_overrides(cfg: SolidarityConfig) -> None:
    """Apply SOLIDARITY_* environment variable overrides."""
    if val := os.environ.get("SOLIDARITY_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("SOLIDARITY_FAIL_ON"):
        if val.lower() in LEVEL_NAMES:
            cfg.check.fail_on = val.lower()
    if val := os.environ.get("SOLIDARITY_DISABLE_RULES"):
        for name in _split_env(val):
            if name in cfg.rules:
                cfg.rules[name].level = Level.OFF.label
    if val := os.environ.get("SOLIDARITY_IGNORE_PATHS"):
        cfg.ignore.paths.extend(_split_env(val, os.pathsep))


def validate_config(cfg: SolidarityConfig) -> None:
    """Reject names the schema does not know. Patterns are checked by the rule set."""
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"[output] format must be one of {', '.join(OUTPUT_FORMATS)}")
    try:
        fail_on = Level.parse(cfg.check.fail_on)
    except ValueError as exc:
        raise ConfigError(f"[check] fail_on: {exc}") from exc
    if fail_on is Level.OFF:
        raise ConfigError("[check] fail_on cannot be 'off'")
    max_annotations = cfg.check.max_annotations
    if max_annotations is not None and (type(max_annotations) is not int or max_annotations < 1):
        raise ConfigError("[check] max_annotations must be a positive integer")
    for rule in cfg.rules.values():
        try:
            Level.parse(rule.level)
            MatchMode.parse(rule.mode)
        except ValueError as exc:
            raise ConfigError(f"rule {rule.name!r}: {exc}") from exc
        if not rule.patterns:
            raise ConfigError(f"rule {rule.name!r} has no patterns")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> SolidarityConfig:
    """Load, validate, and return a SolidarityConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = SolidarityConfig()
    else:
        logger.debug("reading %s", config_path)
        raw = _parse_toml(config_path)
        cfg = SolidarityConfig(
            version=str(raw.get("version", "1.0")),
            ignore=_build_section(raw, IgnoreConfig, "ignore"),
            output=_build_section(raw, OutputConfig, "output"),
            check=_build_section(raw, CheckConfig, "check"),
        )
        rules = raw.get("rules", {})
        if not isinstance(rules, dict):
            raise ConfigError("[rules] must be a table of rule tables")
        _merge_rules(cfg.rules, rules, str(config_path))

    _merge_rules(cfg.rules, load_rule_files(repo_root / RULES_DIRNAME), RULES_DIRNAME)
    _merge_env_overrides(cfg)
    validate_config(cfg)
    return cfg
