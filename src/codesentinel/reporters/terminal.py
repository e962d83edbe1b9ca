from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from codesentinel import __version__
from codesentinel.advisory.types import ActionItem, DesignIdiomReport, IdiomAnalysis
from codesentinel.engine.types import AnalysisResult, Finding
from codesentinel.patterns.compiler import RuleStats
from codesentinel.patterns.spec import RuleDefinition

_SEVERITY_ICON = {"critical": "✖", "high": "✖", "medium": "⚠", "low": "•", "info": "ℹ"}
_SEVERITY_STYLE = {"critical": "bold red", "high": "red", "medium": "yellow", "low": "cyan", "info": "dim"}
_CONFIDENCE_STYLE = {"high": "bold green", "medium": "green", "low": "dim"}


def _header(subtitle_text: str, *, console: Console, subtitle: str | None = None) -> None:
    header = Text()
    header.append("CodeSentinel ", style="bold")
    header.append(f"v{__version__}", style="dim")
    header.append(f" — {subtitle_text}", style="dim")
    console.print(Panel(header, subtitle=subtitle, border_style="cyan"))


def render_terminal(result: AnalysisResult, *, console: Console, show_details: bool = True) -> None:
    _header("code quality scan", console=console, subtitle=f"{result.filename} ({result.language})")

    if show_details:
        for f in result.findings:
            _print_finding(console, f)
        if result.findings:
            console.print()

        if result.strengths:
            console.print(Text("Strengths", style="bold"))
            for s in result.strengths:
                line = Text()
                line.append("  ✔ ", style="green")
                line.append(s.strength_id, style="bold")
                line.append(f"  {s.title}")
                console.print(line)
            console.print()

    _print_summary(result, console=console)


def _print_finding(console: Console, f: Finding) -> None:
    icon = _SEVERITY_ICON.get(f.severity, "•")
    style = _SEVERITY_STYLE.get(f.severity, "")

    line = Text()
    line.append(f"  {icon} ", style=style)
    line.append(f.rule_id, style="bold")
    line.append(f"  ({f.line})", style="dim")
    line.append(f"  {f.title}")
    console.print(line)

    if f.code:
        console.print(Text(f"     {f.line:>4} │ {f.code}", style="dim"))
    if f.suggestion:
        console.print(Text(f"     → {f.suggestion}", style="dim"))
    if f.verification is not None:
        for cmd in f.verification.commands:
            console.print(Text(f"     $ {cmd}", style="dim"))


def _print_summary(result: AnalysisResult, *, console: Console) -> None:
    s = result.summary
    console.print(Text("─" * 60, style="dim"))
    console.print(Text(f"Score: {s.score}/100", style="bold"))
    console.print(
        Text(
            f"Findings: {s.total} (critical={s.critical} high={s.high} medium={s.medium} low={s.low} info={s.info})",
            style="dim",
        )
    )
    console.print(Text(f"Strengths: {s.strengths}", style="dim"))
    console.print(Text("─" * 60, style="dim"))


def render_idioms_terminal(analysis: IdiomAnalysis, *, console: Console) -> None:
    _header("idiom analysis", console=console, subtitle=f"{analysis.filename} (level: {analysis.level})")

    if analysis.detected:
        console.print(Text("Detected idioms", style="bold"))
        for d in analysis.detected:
            line = Text()
            line.append(f"  {d.idiom_id}", style="bold")
            line.append(f"  {d.name}")
            line.append(f"  [{d.confidence}]", style=_CONFIDENCE_STYLE.get(d.confidence, ""))
            console.print(line)
            for loc in d.locations:
                console.print(Text(f"     {loc.line:>4} │ {loc.code}", style="dim"))
        console.print()

    if analysis.inconsistencies:
        console.print(Text("Inconsistencies", style="bold"))
        for f in analysis.inconsistencies:
            line = Text()
            line.append(f"  {_SEVERITY_ICON.get(f.severity, '•')} ", style=_SEVERITY_STYLE.get(f.severity, ""))
            line.append(f.concern_id, style="bold")
            line.append(f"  {f.title}: {f.description}")
            console.print(line)
            for v in f.variants:
                console.print(Text(f"     {v.name}: {v.count}", style="dim"))
            console.print(Text(f"     → {f.recommendation}", style="dim"))
        console.print()

    if analysis.suggestions:
        console.print(Text("Suggestions", style="bold"))
        for s in analysis.suggestions:
            line = Text()
            line.append(f"  {s.suggestion_id}", style="bold")
            line.append(f"  {s.title}")
            line.append(f"  [{s.priority}]", style="dim")
            console.print(line)
            if s.current.line is not None:
                console.print(Text(f"     {s.current.line:>4} │ {s.current.example.strip()}", style="dim"))
            console.print(Text(f"     → {s.suggested.name}: {s.suggested.description}", style="dim"))
        console.print()

    _print_action_items(analysis.action_items, console=console)

    summary = analysis.summary
    console.print(Text("─" * 60, style="dim"))
    console.print(Text(f"Consistency: {summary.overall_consistency.upper()}", style="bold"))
    console.print(
        Text(
            f"Idioms: {summary.idioms_detected}  Inconsistencies: {summary.inconsistencies}  "
            f"Suggestions: {summary.suggestions}",
            style="dim",
        )
    )
    console.print(Text("─" * 60, style="dim"))


def _print_action_items(items: Sequence[ActionItem], *, console: Console) -> None:
    if not items:
        return
    console.print(Text("Action items", style="bold"))
    for item in items:
        line = Text()
        line.append(f"  {item.priority}. ", style="bold")
        line.append(item.title)
        line.append(f"  (effort: {item.effort})", style="dim")
        console.print(line)
        for step in item.steps:
            console.print(Text(f"     {step.order}) {step.instruction}", style="dim"))
        console.print(Text(f"     ? {item.accept_prompt}", style="dim"))
    console.print()


def render_design_terminal(report: DesignIdiomReport, *, console: Console) -> None:
    _header("design idioms", console=console, subtitle=report.filename)

    if not report.idioms:
        console.print(Text("No design idioms detected.", style="dim"))
    for entry in report.idioms:
        d = entry.idiom
        line = Text()
        line.append(f"  {d.idiom_id}", style="bold")
        line.append(f"  {d.name}")
        line.append(f"  [{d.confidence}]", style=_CONFIDENCE_STYLE.get(d.confidence, ""))
        console.print(line)
        if entry.related:
            console.print(Text(f"     related: {', '.join(entry.related)}", style="dim"))
    console.print()

    _print_action_items(report.action_items, console=console)

    console.print(Text("─" * 60, style="dim"))
    console.print(Text(f"Dominant: {', '.join(report.dominant) or '-'}", style="bold"))
    console.print(Text(f"Missing: {', '.join(report.missing) or '-'}", style="dim"))
    console.print(Text("─" * 60, style="dim"))


def render_rules_table(definitions: Sequence[RuleDefinition], stats: RuleStats, *, console: Console) -> None:
    table = Table(title="CodeSentinel Rules")
    table.add_column("ID", style="bold")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Match")
    table.add_column("Title")
    for d in definitions:
        table.add_row(
            d.rule_id,
            d.category,
            Text(d.severity, style=_SEVERITY_STYLE.get(d.severity, "")),
            d.match.tag,
            d.title,
        )
    console.print(table)

    by_category = " ".join(f"{c}={n}" for c, n in stats.by_category.items())
    console.print(Text(f"{stats.total} rule(s): {by_category}", style="dim"))
