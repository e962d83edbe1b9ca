from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from codesentinel.config import CodeSentinelConfig
from codesentinel.engine.scan import apply_severity_overrides, check_buffer, scan
from codesentinel.engine.scoring import sort_findings, summarize
from codesentinel.engine.types import AnalysisResult, Finding
from codesentinel.languages.registry import language_label
from codesentinel.patterns.compiler import RuleCompiler, default_compiler
from codesentinel.patterns.definitions import builtin_definitions
from codesentinel.patterns.loader import load_rule_files
from codesentinel.strengths import analyze_strengths

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def compiler_for_config(config: CodeSentinelConfig, project_root: Path | str = ".") -> RuleCompiler:
    """
    Compiler over the built-in tables plus configured rule files, minus
    disabled rule ids.

    Rule file paths are resolved relative to `project_root`. With nothing
    configured the shared default compiler is returned.
    """

    if not config.rules.files and not config.rules.disable:
        return default_compiler()

    root = Path(project_root)
    extra = load_rule_files(root / path for path in config.rules.files)
    disabled = set(config.rules.disable)
    definitions = [d for d in (*builtin_definitions(), *extra) if d.rule_id not in disabled]
    logger.debug(
        "Using %d rule(s) (%d from rule files, %d disabled).",
        len(definitions),
        len(extra),
        len(disabled),
    )
    return RuleCompiler(definitions)


def analyze_code(
    code: str,
    filename: str,
    *,
    config: CodeSentinelConfig | None = None,
    compiler: RuleCompiler | None = None,
) -> AnalysisResult:
    """
    Full quality report for one buffer.

    Scans every configured category, applies severity overrides, sorts the
    findings most severe first, then adds strengths and the score.
    """

    config = config or CodeSentinelConfig()
    compiler = compiler or default_compiler()
    check_buffer(code, config.max_buffer_chars)

    findings: list[Finding] = []
    for category in config.categories:
        findings.extend(scan(code, filename, category, compiler=compiler, max_chars=None))
    findings = sort_findings(apply_severity_overrides(findings, config.rules.severity_overrides))

    strengths = analyze_strengths(code)
    summary = summarize(findings, strengths)
    logger.debug("%s: %d finding(s), %d strength(s), score %d", filename, summary.total, summary.strengths, summary.score)

    return AnalysisResult(
        filename=filename,
        language=language_label(filename),
        timestamp=_timestamp(),
        summary=summary,
        findings=tuple(findings),
        strengths=tuple(strengths),
    )
