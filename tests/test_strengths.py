from __future__ import annotations

from codesentinel.strengths import MAX_EXAMPLES, STRENGTH_CHECKS, StrengthCheck, analyze_strengths
from codesentinel.patterns.matcher import matcher


def _ids(code: str) -> list[str]:
    return [s.strength_id for s in analyze_strengths(code)]


def test_each_strength_is_reported_once_with_capped_examples() -> None:
    code = "\n".join(f"const value{i} = {i};" for i in range(6))
    strengths = [s for s in analyze_strengths(code) if s.strength_id == "CS-STR030"]
    assert len(strengths) == 1
    assert len(strengths[0].examples) == MAX_EXAMPLES
    assert strengths[0].examples[0] == "const value0 ="


def test_common_good_practices_are_recognized() -> None:
    code = (
        "class NotFoundError extends Error {}\n"
        "const results = await Promise.all(jobs);\n"
        "const port = process.env.PORT;\n"
        "logger.info('started');\n"
    )
    found = _ids(code)
    for strength_id in ("CS-STR012", "CS-STR041", "CS-STR080", "CS-STR090"):
        assert strength_id in found


def test_explanatory_comment_must_fit_on_one_line() -> None:
    assert "CS-STR021" in _ids("// Retries are capped at three.\nrun();")
    assert "CS-STR021" not in _ids("// Retries are capped\nat three.")


def test_no_strengths_in_empty_buffer() -> None:
    assert analyze_strengths("") == []


def test_custom_checks() -> None:
    checks = (StrengthCheck("X-1", matcher(r"\bpure\b"), "Purity", "pure helpers"),)
    strengths = analyze_strengths("pure pure", checks)
    assert [(s.strength_id, s.examples) for s in strengths] == [("X-1", ("pure", "pure"))]


def test_strength_ids_are_unique() -> None:
    ids = [c.strength_id for c in STRENGTH_CHECKS]
    assert len(ids) == len(set(ids))
