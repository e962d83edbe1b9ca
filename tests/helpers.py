from __future__ import annotations

from typing import Any

from codesentinel.engine.types import Finding
from codesentinel.patterns.compiler import RuleCompiler
from codesentinel.patterns.spec import MatchSpec, RawPattern, RuleDefinition


def make_definition(rule_id: str = "CS-TST001", match: MatchSpec | None = None, **overrides: Any) -> RuleDefinition:
    fields: dict[str, Any] = {
        "rule_id": rule_id,
        "title": f"Test rule {rule_id}",
        "description": "Rule used by tests.",
        "severity": "medium",
        "category": "placeholder",
        "match": match if match is not None else RawPattern("match"),
    }
    fields.update(overrides)
    return RuleDefinition(**fields)


def make_compiler(*definitions: RuleDefinition) -> RuleCompiler:
    return RuleCompiler(definitions)


def rule_ids(findings: list[Finding] | tuple[Finding, ...]) -> list[str]:
    return [f.rule_id for f in findings]
