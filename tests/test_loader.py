from __future__ import annotations

from pathlib import Path

import pytest

from codesentinel.engine.scan import scan
from codesentinel.patterns.compiler import RuleCompiler
from codesentinel.patterns.loader import load_rule_file, parse_definition, parse_match_spec
from codesentinel.patterns.spec import FunctionCall, RuleValidationError, SecretPattern

RULE_FILE = """
[[rules]]
id = "ACME-001"
title = "Leftover print"
description = "print() left in code."
severity = "low"
category = "placeholder"
suggestion = "Use logging."

[rules.match]
type = "function_call"
names = ["print"]
match-method-form = true

[[rules]]
id = "ACME-002"
title = "Internal token"
description = "Internal service token in source."
severity = "critical"
category = "security"

[rules.match]
type = "secret_pattern"
kind = "custom"
custom_regex = "acme_[0-9a-f]{8}"

[rules.verification]
assumption = "Token is live"
commands = ["grep -n '<matched_value>' <filename>"]
"""


def _base(**overrides):
    data = {
        "id": "ACME-009",
        "title": "t",
        "description": "d",
        "severity": "medium",
        "category": "error",
        "match": {"type": "raw_regex", "regex_source": "x"},
    }
    data.update(overrides)
    return data


def test_load_rule_file_builds_definitions(tmp_path: Path) -> None:
    path = tmp_path / "rules.toml"
    path.write_text(RULE_FILE, encoding="utf-8")

    defs = load_rule_file(path)
    assert [d.rule_id for d in defs] == ["ACME-001", "ACME-002"]
    assert defs[0].match == FunctionCall(names=("print",), match_method_form=True)
    assert defs[0].suggestion == "Use logging."
    assert defs[1].match == SecretPattern(kind="custom", custom_regex="acme_[0-9a-f]{8}")
    assert defs[1].verification is not None
    assert defs[1].verification.status == "needs_verification"


def test_loaded_rules_scan(tmp_path: Path) -> None:
    path = tmp_path / "rules.toml"
    path.write_text(RULE_FILE, encoding="utf-8")
    compiler = RuleCompiler(load_rule_file(path))

    findings = scan("print('hi')\nTOKEN = 'acme_deadbeef'\n", "tool.py", compiler=compiler)
    assert [f.rule_id for f in findings] == ["ACME-002", "ACME-001"]
    assert findings[0].verification is not None
    assert findings[0].verification.commands == ("grep -n 'acme_deadbeef...' tool.py",)


def test_unknown_match_type_lists_known_types() -> None:
    with pytest.raises(RuleValidationError, match="not a known match type"):
        parse_match_spec({"type": "ast_query"})


def test_unknown_match_field_is_rejected() -> None:
    with pytest.raises(RuleValidationError, match="not a field of function_call"):
        parse_match_spec({"type": "function_call", "names": ["x"], "fuzzy": True})


def test_missing_required_match_field() -> None:
    with pytest.raises(RuleValidationError, match="missing required field"):
        parse_match_spec({"type": "function_call"})


def test_match_field_types_are_checked() -> None:
    with pytest.raises(RuleValidationError, match="must be a list of strings"):
        parse_match_spec({"type": "function_call", "names": "eval"})
    with pytest.raises(RuleValidationError, match="must be a boolean"):
        parse_match_spec({"type": "function_call", "names": ["eval"], "case_insensitive": "yes"})
    with pytest.raises(RuleValidationError, match="must be an integer"):
        parse_match_spec({"type": "chained_access", "min_depth": "4"})


def test_definition_validation() -> None:
    with pytest.raises(RuleValidationError, match="severity"):
        parse_definition(_base(severity="fatal"))
    with pytest.raises(RuleValidationError, match="category"):
        parse_definition(_base(category="style"))
    with pytest.raises(RuleValidationError, match="unknown key"):
        parse_definition(_base(enabled=True))
    with pytest.raises(RuleValidationError, match="non-empty string"):
        parse_definition(_base(title=""))


def test_severity_and_category_are_normalized() -> None:
    definition = parse_definition(_base(severity="HIGH", category="Error"))
    assert definition.severity == "high"
    assert definition.category == "error"


def test_invalid_toml_is_a_validation_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[[rules]\nid = ", encoding="utf-8")
    with pytest.raises(RuleValidationError, match="Invalid TOML"):
        load_rule_file(path)


def test_missing_rule_file(tmp_path: Path) -> None:
    with pytest.raises(RuleValidationError, match="Could not read rule file"):
        load_rule_file(tmp_path / "nope.toml")
