from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Severity = Literal["critical", "high", "medium", "low", "info"]
Category = Literal["security", "deceptive", "placeholder", "error"]
VerificationStatus = Literal["confirmed", "needs_verification"]

# Presentation order (most severe first). Sorting and scoring key off this.
SEVERITIES: tuple[Severity, ...] = ("critical", "high", "medium", "low", "info")

# Enumeration order used when scanning "all categories".
CATEGORIES: tuple[Category, ...] = ("security", "deceptive", "placeholder", "error")


@dataclass(frozen=True, slots=True)
class Verification:
    """
    Instructions for confirming (or dismissing) a finding.

    On a rule definition, `commands` are templates that may contain the
    `<matched_value>` and `<filename>` placeholders. On a finding they have
    already been substituted.
    """

    status: VerificationStatus = "needs_verification"
    commands: tuple[str, ...] = ()
    assumption: str | None = None
    instruction: str | None = None
    confirm_if: str | None = None
    false_positive_if: str | None = None


@dataclass(frozen=True, slots=True)
class Finding:
    rule_id: str
    category: Category
    severity: Severity
    title: str
    description: str
    line: int  # 1-based
    code: str  # trimmed source line
    suggestion: str | None = None
    verification: Verification | None = None


@dataclass(frozen=True, slots=True)
class Strength:
    strength_id: str
    title: str
    description: str
    examples: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class AnalysisSummary:
    total: int
    critical: int
    high: int
    medium: int
    low: int
    info: int
    strengths: int
    score: int


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    filename: str
    language: str
    timestamp: str  # ISO-8601, UTC
    summary: AnalysisSummary
    findings: tuple[Finding, ...]
    strengths: tuple[Strength, ...] = ()
