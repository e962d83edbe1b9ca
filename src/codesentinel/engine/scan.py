from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace

from codesentinel.engine.lines import LineIndex
from codesentinel.engine.types import Category, Finding, Severity, Verification
from codesentinel.patterns.compiler import RuleCompiler, default_compiler
from codesentinel.patterns.spec import CompiledRule

DEFAULT_MAX_BUFFER_CHARS = 1_000_000

MATCHED_VALUE_PLACEHOLDER = "<matched_value>"
FILENAME_PLACEHOLDER = "<filename>"
_MATCHED_PREVIEW_CHARS = 20


class ScanResourceError(RuntimeError):
    """Raised when a buffer is larger than the configured scan limit."""


def check_buffer(code: str, max_chars: int | None) -> None:
    if max_chars is not None and len(code) > max_chars:
        raise ScanResourceError(f"Buffer has {len(code)} characters; the scan limit is {max_chars}.")


def scan(
    code: str,
    filename: str,
    category: Category | None = None,
    *,
    compiler: RuleCompiler | None = None,
    max_chars: int | None = DEFAULT_MAX_BUFFER_CHARS,
) -> list[Finding]:
    """
    Run compiled rules over `code` and return raw findings.

    `category=None` runs every category. Findings are grouped by rule in table
    order and are not deduplicated: overlapping rules each report. Scanning is
    pure; the same input always yields the same findings.
    """

    check_buffer(code, max_chars)
    rules = (compiler or default_compiler()).get_compiled(category)
    index = LineIndex(code)
    findings: list[Finding] = []
    for rule in rules:
        findings.extend(scan_rule(rule, code, filename, index=index))
    return findings


def scan_rule(rule: CompiledRule, code: str, filename: str, *, index: LineIndex | None = None) -> list[Finding]:
    if index is None:
        index = LineIndex(code)
    findings: list[Finding] = []
    for matcher in rule.matchers:
        for match in matcher.find_all(code):
            line, snippet = index.snippet_at(match.start())
            findings.append(
                Finding(
                    rule_id=rule.rule_id,
                    category=rule.category,
                    severity=rule.severity,
                    title=rule.title,
                    description=rule.description,
                    line=line,
                    code=snippet,
                    suggestion=rule.suggestion,
                    verification=substitute_verification(
                        rule.verification,
                        matched_value=match.group(0),
                        filename=filename,
                    ),
                )
            )
    return findings


def substitute_verification(
    verification: Verification | None,
    *,
    matched_value: str,
    filename: str,
) -> Verification | None:
    if verification is None or not verification.commands:
        return verification
    preview = matched_value[:_MATCHED_PREVIEW_CHARS] + "..."
    commands = tuple(
        cmd.replace(MATCHED_VALUE_PLACEHOLDER, preview).replace(FILENAME_PLACEHOLDER, filename)
        for cmd in verification.commands
    )
    return replace(verification, commands=commands)


def apply_severity_overrides(findings: Iterable[Finding], overrides: Mapping[str, Severity]) -> list[Finding]:
    if not overrides:
        return list(findings)
    adjusted: list[Finding] = []
    for f in findings:
        severity = overrides.get(f.rule_id)
        adjusted.append(f if severity is None else replace(f, severity=severity))
    return adjusted
