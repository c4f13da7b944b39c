"""Configuration loading, schema, and defaults."""

from solidarity.config.loader import ConfigError, load_config
from solidarity.config.schema import Level, MatchMode, RuleConfig, SolidarityConfig

__all__ = [
    "ConfigError",
    "Level",
    "MatchMode",
    "RuleConfig",
    "SolidarityConfig",
    "load_config",
]
