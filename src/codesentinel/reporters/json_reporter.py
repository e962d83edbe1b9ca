from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from codesentinel import __version__
from codesentinel.advisory.types import DesignIdiomReport, IdiomAnalysis
from codesentinel.engine.types import AnalysisResult, Finding, Verification
from codesentinel.patterns.compiler import RuleStats
from codesentinel.patterns.spec import RuleDefinition

REPORT_SCHEMA_VERSION = 1
REPORT_SCHEMA_URI = "schemas/codesentinel-report.schema.json"


def _envelope(kind: str) -> dict[str, Any]:
    return {
        "$schema": REPORT_SCHEMA_URI,
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "CodeSentinel", "version": __version__},
        "kind": kind,
    }


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=False)


def render_json(result: AnalysisResult) -> str:
    payload = _envelope("analysis")
    payload.update(
        {
            "filename": result.filename,
            "language": result.language,
            "timestamp": result.timestamp,
            "summary": asdict(result.summary),
            "findings": [_finding_to_dict(f) for f in result.findings],
            "strengths": [
                {
                    "id": s.strength_id,
                    "title": s.title,
                    "description": s.description,
                    "examples": list(s.examples),
                }
                for s in result.strengths
            ],
        }
    )
    return _dumps(payload)


def _verification_to_dict(v: Verification | None) -> dict[str, Any] | None:
    if v is None:
        return None
    return {
        "status": v.status,
        "commands": list(v.commands),
        "assumption": v.assumption,
        "instruction": v.instruction,
        "confirm_if": v.confirm_if,
        "false_positive_if": v.false_positive_if,
    }


def _finding_to_dict(f: Finding) -> dict[str, Any]:
    return {
        "rule_id": f.rule_id,
        "category": f.category,
        "severity": f.severity,
        "title": f.title,
        "description": f.description,
        "line": f.line,
        "code": f.code,
        "suggestion": f.suggestion,
        "verification": _verification_to_dict(f.verification),
    }


def render_idioms_json(analysis: IdiomAnalysis) -> str:
    # The advisory tree is plain frozen dataclasses of str/int/tuple, so
    # `asdict` yields JSON-ready data directly.
    payload = _envelope("idioms")
    payload.update(asdict(analysis))
    return _dumps(payload)


def render_design_json(report: DesignIdiomReport) -> str:
    payload = _envelope("design_idioms")
    payload.update(asdict(report))
    return _dumps(payload)


def render_rules_json(definitions: list[RuleDefinition], stats: RuleStats) -> str:
    payload = _envelope("rules")
    payload.update(
        {
            "stats": {
                "total": stats.total,
                "by_category": dict(stats.by_category),
                "by_severity": dict(stats.by_severity),
            },
            "rules": [
                {
                    "id": d.rule_id,
                    "category": d.category,
                    "severity": d.severity,
                    "title": d.title,
                    "description": d.description,
                    "match_type": d.match.tag,
                    "suggestion": d.suggestion,
                }
                for d in definitions
            ],
        }
    )
    return _dumps(payload)
