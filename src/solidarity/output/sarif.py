"""SARIF v2.1.0 reporter for code scanning dashboards."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from solidarity import __version__
from solidarity.annotations.models import CheckResult
from solidarity.config.schema import Level

_SCHEMA_URI = "https://json.schemastore.org/sarif-2.1.0.json"

_LEVEL_MAP = {
    Level.FAILURE: "error",
    Level.WARNING: "warning",
    Level.NOTICE: "note",
}


def to_dict(result: CheckResult) -> Dict[str, Any]:
    """Convert CheckResult to a SARIF v2.1.0 dict."""
    rules: List[Dict[str, Any]] = []
    rule_index: Dict[str, int] = {}
    results: List[Dict[str, Any]] = []

    for a in result.annotations:
        level = _LEVEL_MAP[a.level]
        # Rule definition (only once per rule name)
        if a.rule not in rule_index:
            rule_index[a.rule] = len(rules)
            rules.append({
                "id": a.rule,
                "name": a.rule,
                "shortDescription": {"text": f"Non-inclusive term: {a.rule}"},
                "defaultConfiguration": {"level": level},
            })

        region: Dict[str, Any] = {"startLine": a.start_line, "endLine": a.end_line}
        if a.start_column:
            region["startColumn"] = a.start_column
            region["endColumn"] = (a.end_column or a.start_column) + 1  # exclusive
        results.append({
            "ruleId": a.rule,
            "ruleIndex": rule_index[a.rule],
            "level": level,
            "message": {"text": a.title},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": a.path},
                        "region": region,
                    }
                }
            ],
        })

    return {
        "$schema": _SCHEMA_URI,
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "in-solidarity",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }


def render(result: CheckResult) -> str:
    """Return SARIF JSON string."""
    return json.dumps(to_dict(result), indent=2)
