from __future__ import annotations

import json

from rich.console import Console

from codesentinel import __version__
from codesentinel.advisory.engine import analyze_design_idioms, analyze_idioms
from codesentinel.engine.types import AnalysisResult, AnalysisSummary, Finding, Strength, Verification
from codesentinel.patterns.compiler import default_compiler, rule_stats
from codesentinel.reporters.json_reporter import (
    REPORT_SCHEMA_VERSION,
    render_design_json,
    render_idioms_json,
    render_json,
    render_rules_json,
)
from codesentinel.reporters.terminal import (
    render_design_terminal,
    render_idioms_terminal,
    render_rules_table,
    render_terminal,
)

MIXED = """\
async function load() {
  await fetchA();
  fetchB().then((b) => b);
}
function findA() { return null; }
function findB() { return null; }
function findC() { return null; }
"""

FACTORIES = "class WidgetFactory {}\nclass ShapeFactory {}\nclass PartFactory {}\n"


def _result() -> AnalysisResult:
    findings = (
        Finding(
            rule_id="CS-SEC001",
            category="security",
            severity="critical",
            title="Hardcoded secret",
            description="A credential is committed to source.",
            line=2,
            code='const apiKey = "abcdefgh12345678";',
            suggestion="Load it from the environment.",
            verification=Verification(commands=("git ls-files app.ts",)),
        ),
        Finding(
            rule_id="CS-PH001",
            category="placeholder",
            severity="low",
            title="TODO comment",
            description="Unfinished work.",
            line=1,
            code="// TODO: wire up",
        ),
    )
    summary = AnalysisSummary(total=2, critical=1, high=0, medium=0, low=1, info=0, strengths=1, score=79)
    return AnalysisResult(
        filename="app.ts",
        language="TypeScript",
        timestamp="2026-01-01T00:00:00.000Z",
        summary=summary,
        findings=findings,
        strengths=(Strength("CS-STR010", "Typed errors", "Catches narrow errors.", ("catch (e: Error)",)),),
    )


def _recording_console() -> Console:
    return Console(record=True, width=120, color_system=None)


def test_render_json_envelope_and_findings() -> None:
    data = json.loads(render_json(_result()))
    assert data["$schema"].endswith("codesentinel-report.schema.json")
    assert data["schema_version"] == REPORT_SCHEMA_VERSION
    assert data["tool"] == {"name": "CodeSentinel", "version": __version__}
    assert data["kind"] == "analysis"
    assert data["summary"]["score"] == 79

    secret, todo = data["findings"]
    assert secret["rule_id"] == "CS-SEC001"
    assert secret["verification"]["status"] == "needs_verification"
    assert secret["verification"]["commands"] == ["git ls-files app.ts"]
    assert todo["verification"] is None
    assert todo["suggestion"] is None
    assert data["strengths"] == [
        {
            "id": "CS-STR010",
            "title": "Typed errors",
            "description": "Catches narrow errors.",
            "examples": ["catch (e: Error)"],
        }
    ]


def test_render_idioms_json_is_serializable() -> None:
    data = json.loads(render_idioms_json(analyze_idioms(MIXED, "svc.ts")))
    assert data["kind"] == "idioms"
    assert data["filename"] == "svc.ts"
    assert data["summary"]["inconsistencies"] == len(data["inconsistencies"])
    assert {item["item_id"] for item in data["action_items"]} >= {"ACT-CS-INC001", "ACT-CS-SUG001"}


def test_render_design_json_is_serializable() -> None:
    data = json.loads(render_design_json(analyze_design_idioms(FACTORIES, "f.ts")))
    assert data["kind"] == "design_idioms"
    assert "Factory Pattern" in data["dominant"]


def test_render_rules_json_counts() -> None:
    definitions = list(default_compiler().definitions)
    data = json.loads(render_rules_json(definitions, rule_stats(definitions)))
    assert data["stats"]["total"] == len(definitions)
    assert sum(data["stats"]["by_category"].values()) == len(definitions)
    assert all(row["match_type"] for row in data["rules"])
    assert "secret_pattern" in {row["match_type"] for row in data["rules"]}


def test_render_terminal_lists_findings_and_summary() -> None:
    console = _recording_console()
    render_terminal(_result(), console=console)
    out = console.export_text()

    assert "CodeSentinel" in out
    assert "app.ts (TypeScript)" in out
    assert "CS-SEC001" in out
    assert '   2 │ const apiKey = "abcdefgh12345678";' in out
    assert "→ Load it from the environment." in out
    assert "$ git ls-files app.ts" in out
    assert "CS-STR010" in out
    assert "Score: 79/100" in out


def test_render_terminal_without_details_keeps_summary() -> None:
    console = _recording_console()
    render_terminal(_result(), console=console, show_details=False)
    out = console.export_text()
    assert "CS-SEC001" not in out
    assert "Score: 79/100" in out


def test_render_idioms_terminal_sections() -> None:
    console = _recording_console()
    render_idioms_terminal(analyze_idioms(MIXED, "svc.ts"), console=console)
    out = console.export_text()

    assert "Inconsistencies" in out
    assert "CS-INC001" in out
    assert "Suggestions" in out
    assert "CS-SUG001" in out
    assert "Action items" in out
    assert "Consistency:" in out


def test_render_design_terminal_reports_dominant_and_missing() -> None:
    console = _recording_console()
    render_design_terminal(analyze_design_idioms(FACTORIES, "f.ts"), console=console)
    out = console.export_text()
    assert "Dominant: Factory Pattern" in out
    assert "Missing:" in out
    assert "Singleton Pattern" in out


def test_render_design_terminal_without_idioms() -> None:
    console = _recording_console()
    render_design_terminal(analyze_design_idioms("const x = 1;\n", "f.ts"), console=console)
    assert "No design idioms detected." in console.export_text()


def test_render_rules_table() -> None:
    definitions = list(default_compiler().definitions)
    console = _recording_console()
    render_rules_table(definitions, rule_stats(definitions), console=console)
    out = console.export_text()
    assert "CodeSentinel Rules" in out
    assert "CS-SEC001" in out
    assert f"{len(definitions)} rule(s):" in out
