from __future__ import annotations

import time
from dataclasses import replace

import pytest

from codesentinel.advisory.engine import (
    analyze_design_idioms,
    analyze_idioms,
    build_action_items,
    detect_idioms,
    detect_inconsistencies,
    generate_suggestions,
    infer_level_from_query,
    overall_consistency,
)
from codesentinel.advisory.idioms import CONCERNS, IDIOM_RULES, SUGGESTION_RULES
from codesentinel.advisory.types import Concern, IdiomRule, Variant
from codesentinel.engine.scan import ScanResourceError
from codesentinel.patterns.matcher import matcher

ASYNC_HEAVY = """\
async function load() {
  await fetchA();
  await fetchB();
  fetchC().then((r) => r);
}
"""

THEN_HEAVY = """\
fetchA().then((a) => a);
fetchB().then((b) => b);
fetchC().then((c) => c);
async function once() {
  await fetchD();
}
"""

NULL_RETURNS = """\
function findA(id) { return null; }
function findB(id) { return null; }
function findC(id) { return null; }
"""


def _by_id(items, attr: str, value: str):
    return next(item for item in items if getattr(item, attr) == value)


def test_mixed_async_styles_prefers_the_most_used_variant() -> None:
    finding = _by_id(detect_inconsistencies(ASYNC_HEAVY), "concern_id", "CS-INC001")
    assert [(v.name, v.count) for v in finding.variants] == [("async/await", 3), ("Promise chains", 1)]
    assert finding.recommended == "async/await"
    assert finding.severity == "low"
    assert finding.description == "Found 2 different approaches being used"
    assert "async/await" in finding.recommendation

    finding = _by_id(detect_inconsistencies(THEN_HEAVY), "concern_id", "CS-INC001")
    assert finding.recommended == "Promise chains"


def test_ties_go_to_the_first_listed_variant() -> None:
    findings = detect_inconsistencies("await x;\nfoo.then(y);\n", CONCERNS[:1])
    assert len(findings) == 1
    assert findings[0].recommended == "async/await"

    concern = Concern(
        "X-INC",
        "Quotes",
        "implementation",
        (Variant("single", matcher("'")), Variant("double", matcher('"'))),
        "Pick one.",
    )
    assert detect_inconsistencies("'a' \"b\"", (concern,))[0].recommended == "single"


def test_single_variant_is_not_an_inconsistency() -> None:
    assert detect_inconsistencies("await a();\nawait b();\n", CONCERNS[:1]) == []


def test_three_variants_raise_severity() -> None:
    code = "await a();\nb.then(c);\nread(path, callback)\n"
    finding = detect_inconsistencies(code, CONCERNS[:1])[0]
    assert len(finding.variants) == 3
    assert finding.severity == "medium"


def test_variant_locations_are_deduplicated_and_capped() -> None:
    code = "await a; await b;\n" + "".join(f"await c{i};\n" for i in range(5)) + "x.then(y);\n"
    usage = detect_inconsistencies(code, CONCERNS[:1])[0].variants[0]
    assert usage.count == 7
    assert len(usage.locations) == 3
    assert [loc.line for loc in usage.locations] == [1, 2, 3]


def test_idiom_confidence_counts_distinct_lines() -> None:
    rule = IdiomRule("X-1", "Foo", "design", (matcher("foo"), matcher("bar")), "foo things")

    (high,) = detect_idioms("foo bar\nfoo\nbar\nfoo\nfoo\nfoo\n", (rule,))
    assert high.confidence == "high"
    assert [loc.line for loc in high.locations] == [1, 2, 4, 5, 6]

    (medium,) = detect_idioms("foo foo\nbar", (rule,))
    assert medium.confidence == "medium"

    (low,) = detect_idioms("foo bar", (rule,))
    assert low.confidence == "low"
    assert low.locations[0].code == "foo bar"

    assert detect_idioms("nothing here", (rule,)) == []


def test_builtin_idioms_cover_every_level() -> None:
    assert {r.level for r in IDIOM_RULES} == {"architectural", "design", "implementation"}
    ids = [r.idiom_id for r in IDIOM_RULES]
    assert len(ids) == len(set(ids))


def test_null_returns_suggest_result_pattern() -> None:
    suggestion = _by_id(generate_suggestions(NULL_RETURNS), "suggestion_id", "CS-SUG001")
    assert suggestion.occurrences == 3
    assert suggestion.priority == "medium"
    assert suggestion.current.line == 1
    assert suggestion.current.example == "return null;"
    assert suggestion.current.description == "Found 3 instance(s) of this pattern"
    assert suggestion.suggested.name == "Result/Either Pattern"


def test_suggestion_respects_threshold_and_adoption() -> None:
    def ids(code: str) -> list[str]:
        return [s.suggestion_id for s in generate_suggestions(code, SUGGESTION_RULES[:1])]

    assert ids("function f() { return null; }") == []
    assert ids(NULL_RETURNS) == ["CS-SUG001"]
    assert ids(NULL_RETURNS + "type R = Result<User, string>;\n") == []


def test_suggestion_priority_scales_with_count() -> None:
    five = "".join(f"function f{i}() {{ return null; }}\n" for i in range(5))
    two = "".join(f"function f{i}() {{ return null; }}\n" for i in range(2))
    assert generate_suggestions(five, SUGGESTION_RULES[:1])[0].priority == "high"
    assert generate_suggestions(two, SUGGESTION_RULES[:1])[0].priority == "low"


def test_strategy_suggestion_for_large_switch() -> None:
    code = """\
switch (type) {
  case 'standard': return amount;
  case 'premium': return amount * 0.9;
  case 'vip': return amount * 0.8;
  case 'staff': return 0;
}
"""
    ids = [s.suggestion_id for s in generate_suggestions(code)]
    assert "CS-SUG005" in ids


def test_action_items_for_inconsistency_and_suggestion() -> None:
    inconsistency = _by_id(detect_inconsistencies(ASYNC_HEAVY), "concern_id", "CS-INC001")
    suggestion = _by_id(generate_suggestions(NULL_RETURNS), "suggestion_id", "CS-SUG001")

    items = build_action_items([inconsistency], [suggestion])
    assert [item.item_id for item in items] == ["ACT-CS-SUG001", "ACT-CS-INC001"]

    fix, result_item = items[1], items[0]
    assert fix.kind == "fix_inconsistency"
    assert fix.priority == 3
    assert fix.title == "Standardize: Mixed Async Styles"
    assert fix.effort == "medium"
    assert [s.instruction for s in fix.steps] == [
        'Adopt "async/await" as the standard (most commonly used: 3 instances)',
        'Convert 1 instance(s) of "Promise chains" to "async/await"',
    ]
    assert fix.accept_prompt == 'Shall I refactor to use "async/await" consistently?'

    assert result_item.kind == "implement_pattern"
    assert result_item.priority == 2
    assert result_item.effort == "medium"
    assert result_item.steps[0].edit is not None
    assert result_item.steps[0].edit.target == "return null;"
    assert all(step.edit is None for step in result_item.steps[1:])
    assert [s.order for s in result_item.steps] == [1, 2, 3, 4]
    assert result_item.accept_prompt == "Would you like me to implement the Result/Either Pattern?"


def test_action_item_order_is_stable_for_equal_priority() -> None:
    first, second = detect_inconsistencies(ASYNC_HEAVY)[:2]
    items = build_action_items([first, second], [])
    assert [i.item_id for i in items] == [f"ACT-{first.concern_id}", f"ACT-{second.concern_id}"]


def test_overall_consistency() -> None:
    assert overall_consistency([]) == "high"
    assert overall_consistency(detect_inconsistencies(ASYNC_HEAVY)) == "medium"


def test_analyze_idioms_filters_by_level() -> None:
    full = analyze_idioms(ASYNC_HEAVY + NULL_RETURNS, "svc.ts")
    assert full.level == "all"
    assert full.summary.inconsistencies == len(full.inconsistencies) > 0
    assert full.summary.suggestions == len(full.suggestions)

    arch = analyze_idioms(ASYNC_HEAVY + NULL_RETURNS, "svc.ts", "architectural")
    assert arch.inconsistencies == ()
    assert arch.summary.overall_consistency == "high"
    assert all(d.level == "architectural" for d in arch.detected)
    assert all(s.level == "architectural" for s in arch.suggestions)


def test_analyze_idioms_enforces_buffer_limit() -> None:
    with pytest.raises(ScanResourceError):
        analyze_idioms("x" * 50, "big.ts", max_chars=10)


def test_design_report() -> None:
    code = "class WidgetFactory {}\nclass ShapeFactory {}\nclass PartFactory {}\n"
    report = analyze_design_idioms(code, "factory.ts")
    (entry,) = [e for e in report.idioms if e.idiom.name == "Factory Pattern"]
    assert entry.related == ("Builder Pattern", "Singleton Pattern")
    assert "Factory Pattern" in report.dominant
    assert "Factory Pattern" not in report.missing
    assert "Singleton Pattern" in report.missing
    assert all(e.idiom.level == "design" for e in report.idioms)


@pytest.mark.parametrize(
    ("query", "level"),
    [
        ("How is the project structure organized?", "architectural"),
        ("Is there a factory somewhere?", "design"),
        ("check my async usage", "implementation"),
        ("show me everything", "all"),
        ("hello", None),
    ],
)
def test_infer_level_from_query(query: str, level: str | None) -> None:
    assert infer_level_from_query(query) == level


GUARDED = """\
if (user) {
  const greeting = buildGreeting(user.name, user.locale);
  send(greeting);
} else {
  sendAnonymous();
}
"""


def _rule(suggestion_id: str):
    return next(r for r in SUGGESTION_RULES if r.suggestion_id == suggestion_id)


def test_guard_clause_suggestion_for_repeated_if_else() -> None:
    rule = _rule("CS-SUG004")
    assert generate_suggestions(GUARDED, (rule,)) == []

    (suggestion,) = generate_suggestions(GUARDED * 2, (rule,))
    assert suggestion.occurrences == 2
    assert suggestion.current.line == 1


def test_guard_clause_detector_is_linear_on_if_without_else() -> None:
    block = 'if (a) {\n  doSomething("' + "a" * 60 + '");\n}\n'
    code = block * (500_000 // len(block))

    started = time.perf_counter()
    assert _rule("CS-SUG004").detector.count(code) == 0
    assert time.perf_counter() - started < 2.0


def test_design_report_keeps_consider_actions() -> None:
    design_result_rule = replace(SUGGESTION_RULES[0], level="design")
    assert design_result_rule.plan.kind == "consider"

    report = analyze_design_idioms(NULL_RETURNS, "repo.ts", suggestion_rules=(design_result_rule,))
    assert [(item.item_id, item.kind) for item in report.action_items] == [("ACT-CS-SUG001", "consider")]

    (suggestion,) = generate_suggestions(NULL_RETURNS, (design_result_rule,))
    assert build_action_items([], [suggestion])[0].kind == "implement_pattern"
