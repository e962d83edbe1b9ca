from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from codesentinel.engine.types import SEVERITIES, AnalysisSummary, Finding, Severity, Strength

# Points lost per finding. Info findings are reported but never cost points.
SEVERITY_PENALTY: dict[Severity, int] = {
    "critical": 25,
    "high": 15,
    "medium": 5,
    "low": 1,
    "info": 0,
}
STRENGTH_BONUS = 2

SEVERITY_RANK: dict[Severity, int] = {severity: rank for rank, severity in enumerate(SEVERITIES)}


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Most severe first; findings of equal severity keep their scan order."""
    return sorted(findings, key=lambda f: SEVERITY_RANK.get(f.severity, len(SEVERITIES)))


def severity_counts(findings: Iterable[Finding]) -> dict[Severity, int]:
    counts = Counter(f.severity for f in findings)
    return {severity: counts.get(severity, 0) for severity in SEVERITIES}


def compute_score(counts: Mapping[Severity, int], strengths: int = 0) -> int:
    """
    Quality score on a 0..100 scale.

    100, minus a fixed penalty per finding by severity, plus a small bonus per
    recognized strength, clamped to the range.
    """

    raw = 100
    for severity, penalty in SEVERITY_PENALTY.items():
        raw -= penalty * counts.get(severity, 0)
    raw += STRENGTH_BONUS * strengths
    return max(0, min(100, raw))


def summarize(findings: Sequence[Finding], strengths: Sequence[Strength] = ()) -> AnalysisSummary:
    counts = severity_counts(findings)
    return AnalysisSummary(
        total=len(findings),
        critical=counts["critical"],
        high=counts["high"],
        medium=counts["medium"],
        low=counts["low"],
        info=counts["info"],
        strengths=len(strengths),
        score=compute_score(counts, len(strengths)),
    )
