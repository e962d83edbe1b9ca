from __future__ import annotations

from codesentinel.engine.scoring import compute_score, severity_counts, sort_findings, summarize
from codesentinel.engine.types import Finding, Strength


def _finding(rule_id: str, severity: str) -> Finding:
    return Finding(
        rule_id=rule_id,
        category="error",
        severity=severity,  # type: ignore[arg-type]
        title=rule_id,
        description="",
        line=1,
        code="",
    )


def test_score_penalties_and_strength_bonus() -> None:
    counts = {"critical": 1, "high": 1, "medium": 0, "low": 0, "info": 0}
    assert compute_score(counts, strengths=2) == 64
    assert compute_score({"medium": 2, "low": 3}) == 87


def test_info_findings_cost_nothing() -> None:
    assert compute_score({"info": 50}) == 100


def test_score_is_clamped() -> None:
    assert compute_score({"critical": 10}) == 0
    assert compute_score({}, strengths=20) == 100


def test_sort_is_most_severe_first_and_stable() -> None:
    findings = [
        _finding("L1", "low"),
        _finding("C1", "critical"),
        _finding("L2", "low"),
        _finding("H1", "high"),
        _finding("C2", "critical"),
    ]
    assert [f.rule_id for f in sort_findings(findings)] == ["C1", "C2", "H1", "L1", "L2"]


def test_summarize_counts_each_severity() -> None:
    findings = [_finding("A", "critical"), _finding("B", "high"), _finding("C", "info")]
    strengths = [Strength("S1", "Typed", "typed code"), Strength("S2", "Tests", "has tests")]
    summary = summarize(findings, strengths)
    assert summary.total == 3
    assert (summary.critical, summary.high, summary.medium, summary.low, summary.info) == (1, 1, 0, 0, 1)
    assert summary.strengths == 2
    assert summary.score == 64
    assert severity_counts([]) == {"critical": 0, "high": 0, "medium": 0, "low": 0, "info": 0}
