"""Default rule set, message template and starter .solidarity.toml."""

from typing import Any, Dict

# Placeholders: {match} (text as written), {rule}, {suggestions} (comma list)
DEFAULT_MESSAGE = (
    "Please consider an alternative to `{match}`. Possibilities include: {suggestions}"
)

# Rules a repository gets without any configuration. Order is rule order.
DEFAULT_RULES: Dict[str, Dict[str, Any]] = {
    "master": {
        "patterns": ["master"],
        "level": "warning",
        "alternatives": ["primary", "main", "leader", "active", "writer"],
    },
    "slave": {
        "patterns": ["slaves?"],
        "level": "warning",
        "alternatives": ["secondary", "node", "worker", "replica", "passive"],
    },
    "whitelist": {
        "patterns": [r"white[_-]*list(?:s|ed|ing)?"],
        "level": "warning",
        "alternatives": ["include list", "allow list"],
    },
    "blacklist": {
        "patterns": [r"black[_-]*list(?:s|ed|ing)?"],
        "level": "warning",
        "alternatives": ["exclude list", "deny list", "block list"],
    },
    "grandfathered": {
        "patterns": [r"grandfather(?:s|ed|ing)?"],
        "level": "off",
        "alternatives": ["legacy status", "exempt"],
    },
    "sanity": {
        "patterns": [r"sanity"],
        "level": "off",
        "alternatives": ["confidence", "quick check", "coherence check"],
    },
    "dummy": {
        "patterns": [r"dummy", r"dummies"],
        "level": "off",
        "alternatives": ["placeholder", "sample", "stub"],
    },
    "man-hours": {
        "patterns": [r"man[_ -]*hours?"],
        "level": "off",
        "alternatives": ["person hours", "engineer hours"],
    },
}

DEFAULT_TOML = """\
# in-solidarity configuration
version = "1.0"

[check]
fail_on = "failure"        # notice | warning | failure: exit 1 at or above this level
max_annotations = 50       # annotations per check run (GitHub caps a request at 50)
# annotation_format = "github"   # emit ::warning workflow commands

[output]
format = "terminal"        # terminal | json | sarif | checks
show_summary = true

[ignore]
# paths = ["vendor/*", "docs/legacy/*"]

# Override a default rule field by field ...
# [rules.master]
# level = "failure"
#
# ... switch one off ...
# [rules.slave]
# level = "off"
#
# ... or add your own. mode is "word" (default) or "substring".
# [rules.sanity-check]
# patterns = ["sanity[_ -]*check"]
# level = "notice"
# alternatives = ["smoke test", "confidence check"]
# message = "Consider `{suggestions}` instead of `{match}`"
"""
