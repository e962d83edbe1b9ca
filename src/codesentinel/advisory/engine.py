from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from codesentinel.advisory.idioms import CONCERNS, IDIOM_RULES, RELATED_IDIOMS, SUGGESTION_RULES
from codesentinel.advisory.types import (
    ActionItem,
    ActionKind,
    ActionStep,
    AdvisorySummary,
    CodeEdit,
    Concern,
    Confidence,
    Consistency,
    CurrentApproach,
    DesignIdiom,
    DesignIdiomReport,
    DetectedIdiom,
    IdiomAnalysis,
    Effort,
    IdiomRule,
    InconsistencyFinding,
    LevelFilter,
    PlanKind,
    Priority,
    SourceLocation,
    Suggestion,
    SuggestionRule,
    VariantUsage,
)
from codesentinel.engine.lines import LineIndex
from codesentinel.engine.scan import DEFAULT_MAX_BUFFER_CHARS, check_buffer

logger = logging.getLogger(__name__)

MAX_IDIOM_LOCATIONS = 5
MAX_VARIANT_LOCATIONS = 3

_PRIORITY_RANK: dict[str, int] = {"high": 1, "medium": 2, "low": 3}


def _dedupe_by_line(locations: Iterable[SourceLocation]) -> list[SourceLocation]:
    seen: set[int] = set()
    out: list[SourceLocation] = []
    for loc in locations:
        if loc.line in seen:
            continue
        seen.add(loc.line)
        out.append(loc)
    return out


def _location(index: LineIndex, match: re.Match[str]) -> SourceLocation:
    line, snippet = index.snippet_at(match.start())
    return SourceLocation(line=line, code=snippet)


def _confidence(distinct_lines: int) -> Confidence:
    if distinct_lines >= 3:
        return "high"
    if distinct_lines == 2:
        return "medium"
    return "low"


def detect_idioms(
    code: str,
    rules: Sequence[IdiomRule] = IDIOM_RULES,
    *,
    index: LineIndex | None = None,
) -> list[DetectedIdiom]:
    """
    Recognize architectural, design and implementation idioms.

    Locations are deduplicated by line (first match on a line wins) and capped.
    Confidence reflects how many distinct lines matched before the cap.
    """

    if index is None:
        index = LineIndex(code)
    detected: list[DetectedIdiom] = []
    for rule in rules:
        locations = _dedupe_by_line(
            _location(index, match) for m in rule.matchers for match in m.find_all(code)
        )
        if not locations:
            continue
        detected.append(
            DetectedIdiom(
                idiom_id=rule.idiom_id,
                name=rule.name,
                level=rule.level,
                confidence=_confidence(len(locations)),
                description=rule.description,
                locations=tuple(locations[:MAX_IDIOM_LOCATIONS]),
            )
        )
    return detected


def recommend_variant(variants: Sequence[VariantUsage]) -> VariantUsage:
    """Most used variant; on a tie the earliest listed variant wins."""
    # max() returns the first maximal element.
    return max(variants, key=lambda v: v.count)


def detect_inconsistencies(
    code: str,
    concerns: Sequence[Concern] = CONCERNS,
    *,
    index: LineIndex | None = None,
) -> list[InconsistencyFinding]:
    if index is None:
        index = LineIndex(code)
    findings: list[InconsistencyFinding] = []
    for concern in concerns:
        used: list[VariantUsage] = []
        for variant in concern.variants:
            matches = variant.matcher.find_all(code)
            if not matches:
                continue
            locations = _dedupe_by_line(_location(index, m) for m in matches)
            used.append(
                VariantUsage(
                    name=variant.name,
                    locations=tuple(locations[:MAX_VARIANT_LOCATIONS]),
                    count=len(matches),
                )
            )
        if len(used) < 2:
            continue
        dominant = recommend_variant(used)
        findings.append(
            InconsistencyFinding(
                concern_id=concern.concern_id,
                title=concern.title,
                level=concern.level,
                severity="medium" if len(used) >= 3 else "low",
                description=f"Found {len(used)} different approaches being used",
                variants=tuple(used),
                recommended=dominant.name,
                recommendation=(
                    f'Standardize on "{dominant.name}", the most used approach here '
                    f"({dominant.count} instance(s)). {concern.guidance}"
                ),
            )
        )
    return findings


def _priority_for_count(count: int) -> Priority:
    if count >= 5:
        return "high"
    if count >= 3:
        return "medium"
    return "low"


def generate_suggestions(
    code: str,
    rules: Sequence[SuggestionRule] = SUGGESTION_RULES,
    *,
    index: LineIndex | None = None,
) -> list[Suggestion]:
    if index is None:
        index = LineIndex(code)
    suggestions: list[Suggestion] = []
    for rule in rules:
        matches = rule.detector.find_all(code)
        if len(matches) < rule.threshold or not matches:
            continue
        if rule.already_adopted is not None and rule.already_adopted.search(code) is not None:
            continue
        first = matches[0]
        line = index.line_of(first.start())
        suggestions.append(
            Suggestion(
                suggestion_id=rule.suggestion_id,
                title=rule.title,
                level=rule.level,
                priority=_priority_for_count(len(matches)),
                occurrences=len(matches),
                current=CurrentApproach(
                    name="Current Implementation",
                    description=f"Found {len(matches)} instance(s) of this pattern",
                    example=first.group(0),
                    line=line,
                ),
                suggested=rule.approach,
                plan=rule.plan,
            )
        )
    return suggestions


def _effort_for_steps(steps: int) -> Effort:
    if steps > 4:
        return "high"
    if steps > 2:
        return "medium"
    return "low"


def _action_kind(plan_kind: PlanKind, *, keep_consider: bool) -> ActionKind:
    if plan_kind == "refactor":
        return "refactor"
    if keep_consider and plan_kind == "consider":
        return "consider"
    return "implement_pattern"


def _suggestion_action(suggestion: Suggestion, *, keep_consider: bool = False) -> ActionItem:
    plan = suggestion.plan
    steps: list[ActionStep] = []
    for i, step in enumerate(plan.steps):
        edit = None
        if i == 0 and plan.code_change is not None:
            edit = CodeEdit(action="replace", target=plan.code_change.before, content=plan.code_change.after)
        steps.append(ActionStep(order=i + 1, instruction=step, edit=edit))
    return ActionItem(
        item_id=f"ACT-{suggestion.suggestion_id}",
        priority=_PRIORITY_RANK[suggestion.priority],
        kind=_action_kind(plan.kind, keep_consider=keep_consider),
        title=suggestion.title,
        reason=suggestion.suggested.why,
        effort=_effort_for_steps(len(plan.steps)),
        steps=tuple(steps),
        accept_prompt=f"Would you like me to implement the {suggestion.suggested.name}?",
    )


def _inconsistency_action(finding: InconsistencyFinding) -> ActionItem:
    dominant = recommend_variant(finding.variants)
    steps = [
        ActionStep(
            order=1,
            instruction=f'Adopt "{dominant.name}" as the standard (most commonly used: {dominant.count} instances)',
        )
    ]
    for variant in finding.variants:
        if variant.name == dominant.name:
            continue
        steps.append(
            ActionStep(
                order=len(steps) + 1,
                instruction=f'Convert {variant.count} instance(s) of "{variant.name}" to "{dominant.name}"',
            )
        )
    return ActionItem(
        item_id=f"ACT-{finding.concern_id}",
        priority=_PRIORITY_RANK.get(finding.severity, 3),
        kind="fix_inconsistency",
        title=f"Standardize: {finding.title}",
        reason=finding.description,
        effort="high" if finding.total_occurrences > 10 else "medium",
        steps=tuple(steps),
        accept_prompt=f'Shall I refactor to use "{dominant.name}" consistently?',
    )


def build_action_items(
    inconsistencies: Sequence[InconsistencyFinding],
    suggestions: Sequence[Suggestion],
) -> list[ActionItem]:
    """Inconsistency items first, then suggestion items, stably ordered by priority."""

    items = [_inconsistency_action(f) for f in inconsistencies]
    items.extend(_suggestion_action(s) for s in suggestions)
    return sorted(items, key=lambda item: item.priority)


def overall_consistency(inconsistencies: Sequence[InconsistencyFinding]) -> Consistency:
    if not inconsistencies:
        return "high"
    total_variants = sum(len(f.variants) for f in inconsistencies)
    if len(inconsistencies) <= 2 and total_variants <= 6:
        return "medium"
    return "low"


def analyze_idioms(
    code: str,
    filename: str,
    level: LevelFilter = "all",
    *,
    max_chars: int | None = DEFAULT_MAX_BUFFER_CHARS,
) -> IdiomAnalysis:
    check_buffer(code, max_chars)
    index = LineIndex(code)

    detected = detect_idioms(code, index=index)
    inconsistencies = detect_inconsistencies(code, index=index)
    suggestions = generate_suggestions(code, index=index)
    if level != "all":
        detected = [d for d in detected if d.level == level]
        inconsistencies = [f for f in inconsistencies if f.level == level]
        suggestions = [s for s in suggestions if s.level == level]

    action_items = build_action_items(inconsistencies, suggestions)
    logger.debug(
        "%s: %d idiom(s), %d inconsistency(ies), %d suggestion(s)",
        filename,
        len(detected),
        len(inconsistencies),
        len(suggestions),
    )
    return IdiomAnalysis(
        filename=filename,
        level=level,
        summary=AdvisorySummary(
            idioms_detected=len(detected),
            inconsistencies=len(inconsistencies),
            suggestions=len(suggestions),
            overall_consistency=overall_consistency(inconsistencies),
        ),
        detected=tuple(detected),
        inconsistencies=tuple(inconsistencies),
        suggestions=tuple(suggestions),
        action_items=tuple(action_items),
    )


def analyze_design_idioms(
    code: str,
    filename: str,
    *,
    rules: Sequence[IdiomRule] = IDIOM_RULES,
    suggestion_rules: Sequence[SuggestionRule] = SUGGESTION_RULES,
    max_chars: int | None = DEFAULT_MAX_BUFFER_CHARS,
) -> DesignIdiomReport:
    """
    Design-level view: detected design idioms, how they relate, which ones
    dominate the file and which ones are absent.

    Action items keep the `consider` kind of advisory plans instead of
    folding it into `implement_pattern`.
    """

    check_buffer(code, max_chars)
    index = LineIndex(code)
    detected = [d for d in detect_idioms(code, rules, index=index) if d.level == "design"]
    suggestions = [s for s in generate_suggestions(code, suggestion_rules, index=index) if s.level == "design"]

    detected_names = {d.name for d in detected}
    missing = tuple(r.name for r in rules if r.level == "design" and r.name not in detected_names)
    dominant = tuple(d.name for d in detected if d.confidence == "high" or len(d.locations) >= 3)
    design_items = [_suggestion_action(s, keep_consider=True) for s in suggestions]

    return DesignIdiomReport(
        filename=filename,
        idioms=tuple(DesignIdiom(idiom=d, related=RELATED_IDIOMS.get(d.name, ())) for d in detected),
        suggestions=tuple(suggestions),
        action_items=tuple(sorted(design_items, key=lambda i: i.priority)),
        dominant=dominant,
        missing=missing,
    )


_LEVEL_KEYWORDS: tuple[tuple[LevelFilter, re.Pattern[str]], ...] = (
    ("architectural", re.compile(r"architect|structure|layer|module|organization")),
    ("design", re.compile(r"design pattern|factory|singleton|observer|strategy|builder|injection")),
    ("implementation", re.compile(r"code style|async|error handling|naming|function|variable")),
    ("all", re.compile(r"all|everything|full|complete")),
)


def infer_level_from_query(query: str) -> LevelFilter | None:
    """
    Guess which idiom level a free-text question is about.

    Keyword groups are checked from most to least specific; returns None when
    nothing matches.
    """

    lowered = query.lower()
    for level, pattern in _LEVEL_KEYWORDS:
        if pattern.search(lowered):
            return level
    return None
