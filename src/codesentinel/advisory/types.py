from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from codesentinel.engine.types import Severity
from codesentinel.patterns.matcher import TextMatcher

IdiomLevel = Literal["architectural", "design", "implementation"]
LevelFilter = Literal["architectural", "design", "implementation", "all"]
Confidence = Literal["high", "medium", "low"]
Priority = Literal["high", "medium", "low"]
Effort = Literal["low", "medium", "high"]
Consistency = Literal["high", "medium", "low"]
PlanKind = Literal["refactor", "add", "replace", "consider"]
ActionKind = Literal["fix_inconsistency", "implement_pattern", "refactor", "consider"]

IDIOM_LEVELS: tuple[IdiomLevel, ...] = ("architectural", "design", "implementation")
LEVEL_FILTERS: tuple[LevelFilter, ...] = ("architectural", "design", "implementation", "all")


@dataclass(frozen=True, slots=True)
class SourceLocation:
    line: int  # 1-based
    code: str


@dataclass(frozen=True, slots=True)
class IdiomRule:
    idiom_id: str
    name: str
    level: IdiomLevel
    matchers: tuple[TextMatcher, ...]
    description: str


@dataclass(frozen=True, slots=True)
class Variant:
    name: str
    matcher: TextMatcher


@dataclass(frozen=True, slots=True)
class Concern:
    """A group of competing ways to do the same thing."""

    concern_id: str
    title: str
    level: IdiomLevel
    variants: tuple[Variant, ...]
    guidance: str


@dataclass(frozen=True, slots=True)
class ApproachTemplate:
    name: str
    description: str
    why: str
    benefits: tuple[str, ...]
    tradeoffs: tuple[str, ...]
    example: str


@dataclass(frozen=True, slots=True)
class CodeChange:
    before: str
    after: str


@dataclass(frozen=True, slots=True)
class RemediationPlan:
    kind: PlanKind
    description: str
    steps: tuple[str, ...]
    code_change: CodeChange | None = None


@dataclass(frozen=True, slots=True)
class SuggestionRule:
    suggestion_id: str
    title: str
    level: IdiomLevel
    detector: TextMatcher
    approach: ApproachTemplate
    plan: RemediationPlan
    threshold: int = 1
    # When this appears anywhere in the buffer the idiom counts as adopted.
    already_adopted: TextMatcher | None = None


@dataclass(frozen=True, slots=True)
class DetectedIdiom:
    idiom_id: str
    name: str
    level: IdiomLevel
    confidence: Confidence
    description: str
    locations: tuple[SourceLocation, ...]


@dataclass(frozen=True, slots=True)
class VariantUsage:
    name: str
    locations: tuple[SourceLocation, ...]
    count: int


@dataclass(frozen=True, slots=True)
class InconsistencyFinding:
    concern_id: str
    title: str
    level: IdiomLevel
    severity: Severity
    description: str
    variants: tuple[VariantUsage, ...]
    recommended: str
    recommendation: str

    @property
    def total_occurrences(self) -> int:
        return sum(v.count for v in self.variants)


@dataclass(frozen=True, slots=True)
class CurrentApproach:
    name: str
    description: str
    example: str
    line: int | None = None


@dataclass(frozen=True, slots=True)
class Suggestion:
    suggestion_id: str
    title: str
    level: IdiomLevel
    priority: Priority
    occurrences: int
    current: CurrentApproach
    suggested: ApproachTemplate
    plan: RemediationPlan


@dataclass(frozen=True, slots=True)
class CodeEdit:
    action: Literal["insert", "replace", "delete"]
    target: str
    content: str


@dataclass(frozen=True, slots=True)
class ActionStep:
    order: int
    instruction: str
    edit: CodeEdit | None = None


@dataclass(frozen=True, slots=True)
class ActionItem:
    item_id: str
    priority: int  # 1 (high) .. 3 (low)
    kind: ActionKind
    title: str
    reason: str
    effort: Effort
    steps: tuple[ActionStep, ...]
    accept_prompt: str


@dataclass(frozen=True, slots=True)
class AdvisorySummary:
    idioms_detected: int
    inconsistencies: int
    suggestions: int
    overall_consistency: Consistency


@dataclass(frozen=True, slots=True)
class IdiomAnalysis:
    filename: str
    level: LevelFilter
    summary: AdvisorySummary
    detected: tuple[DetectedIdiom, ...]
    inconsistencies: tuple[InconsistencyFinding, ...]
    suggestions: tuple[Suggestion, ...]
    action_items: tuple[ActionItem, ...]


@dataclass(frozen=True, slots=True)
class DesignIdiom:
    idiom: DetectedIdiom
    related: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DesignIdiomReport:
    filename: str
    idioms: tuple[DesignIdiom, ...]
    suggestions: tuple[Suggestion, ...]
    action_items: tuple[ActionItem, ...]
    dominant: tuple[str, ...]
    missing: tuple[str, ...]
