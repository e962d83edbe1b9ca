from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Annotated, cast

import click
import typer
from rich.console import Console

from codesentinel import __version__
from codesentinel.advisory.engine import analyze_design_idioms, analyze_idioms, infer_level_from_query
from codesentinel.advisory.types import LEVEL_FILTERS, LevelFilter
from codesentinel.analysis import analyze_code, compiler_for_config
from codesentinel.config import CodeSentinelConfig, ConfigError, find_project_root, load_config
from codesentinel.engine.scan import ScanResourceError
from codesentinel.engine.types import CATEGORIES, Category
from codesentinel.logging_utils import configure_logging
from codesentinel.patterns.compiler import RuleCompiler, rule_stats
from codesentinel.patterns.spec import RuleValidationError
from codesentinel.reporters.json_reporter import (
    render_design_json,
    render_idioms_json,
    render_json,
    render_rules_json,
)
from codesentinel.reporters.terminal import (
    render_design_terminal,
    render_idioms_terminal,
    render_rules_table,
    render_terminal,
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="CodeSentinel — rule-based code quality scanner.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_FORMATS = ("terminal", "json")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Reduce non-essential output."),
    ] = False,
) -> None:
    """CodeSentinel CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


def _cli_settings() -> dict[str, bool]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False}
    return {"verbose": bool(ctx.obj.get("verbose", False)), "quiet": bool(ctx.obj.get("quiet", False))}


def _normalize_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in _FORMATS:
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")
    return normalized


def _normalize_categories(values: list[str] | None) -> tuple[Category, ...] | None:
    if not values:
        return None
    out: list[Category] = []
    for raw in values:
        normalized = raw.strip().lower()
        if normalized not in CATEGORIES:
            raise typer.BadParameter(f"Unknown category: {raw!r}. Use: {', '.join(CATEGORIES)}.")
        out.append(cast(Category, normalized))
    return tuple(c for c in CATEGORIES if c in out)


def _read_source(source: str, filename: str | None) -> tuple[str, str, Path]:
    """Return (code, display filename, directory used for config discovery)."""

    if source.strip() == "-":
        return sys.stdin.read(), filename or "<stdin>", Path.cwd()
    path = Path(source)
    try:
        code = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        err_console.print(f"Could not read {source}: {exc}")
        raise typer.Exit(code=2) from exc
    return code, filename or path.name, path.resolve().parent


def _load_project(start: Path) -> tuple[CodeSentinelConfig, Path]:
    root = find_project_root(start)
    try:
        config = load_config(root)
    except ConfigError as exc:
        err_console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc
    logger.debug("Project root: %s", root)
    return config, root


def _build_compiler(config: CodeSentinelConfig, root: Path) -> RuleCompiler:
    try:
        return compiler_for_config(config, root)
    except RuleValidationError as exc:
        _print_rule_errors(exc.errors)
        raise typer.Exit(code=2) from exc


def _print_rule_errors(errors: tuple[str, ...] | list[str]) -> None:
    err_console.print("Invalid rule definitions:")
    for err in errors:
        err_console.print(f"  - {err}")


@app.command()
def scan(
    source: Annotated[
        str,
        typer.Argument(help="File to scan, or '-' to read from stdin."),
    ],
    filename: Annotated[
        str | None,
        typer.Option("--filename", help="Filename to report (defaults to the file's name, or <stdin>).", show_default=False),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    category: Annotated[
        list[str] | None,
        typer.Option("--category", "-c", help="Only scan this category (repeatable).", show_default=False),
    ] = None,
    fail_under: Annotated[
        int | None,
        typer.Option("--fail-under", min=0, max=100, help="Exit 1 when the score is below this value.", show_default=False),
    ] = None,
) -> None:
    """
    Scan one file for security, deceptive, placeholder and error-handling issues.
    """

    fmt = _normalize_format(output_format)
    categories = _normalize_categories(category)
    code, display_name, start = _read_source(source, filename)
    config, root = _load_project(start)
    if categories is not None:
        config = replace(config, categories=categories)
    compiler = _build_compiler(config, root)

    try:
        result = analyze_code(code, display_name, config=config, compiler=compiler)
    except RuleValidationError as exc:
        _print_rule_errors(exc.errors)
        raise typer.Exit(code=2) from exc
    except ScanResourceError as exc:
        err_console.print(str(exc))
        raise typer.Exit(code=2) from exc

    if fmt == "json":
        typer.echo(render_json(result))
    else:
        render_terminal(result, console=console, show_details=not _cli_settings()["quiet"])

    threshold = fail_under if fail_under is not None else config.fail_under
    if result.summary.score < threshold:
        logger.info("Score %d is below the required %d.", result.summary.score, threshold)
        raise typer.Exit(code=1)


@app.command()
def patterns(
    source: Annotated[
        str,
        typer.Argument(help="File to analyze, or '-' to read from stdin."),
    ],
    filename: Annotated[
        str | None,
        typer.Option("--filename", help="Filename to report (defaults to the file's name, or <stdin>).", show_default=False),
    ] = None,
    level: Annotated[
        str | None,
        typer.Option("--level", help="Idiom level: architectural, design, implementation, all.", show_default=False),
    ] = None,
    query: Annotated[
        str | None,
        typer.Option("--query", help="Free-text question used to pick the idiom level.", show_default=False),
    ] = None,
    design: Annotated[
        bool,
        typer.Option("--design", help="Report design idioms, how they relate, and which are missing."),
    ] = False,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
) -> None:
    """
    Detect idioms, inconsistencies and refactoring suggestions in one file.
    """

    fmt = _normalize_format(output_format)
    code, display_name, start = _read_source(source, filename)
    config, _root = _load_project(start)

    try:
        if design:
            report = analyze_design_idioms(code, display_name, max_chars=config.max_buffer_chars)
            if fmt == "json":
                typer.echo(render_design_json(report))
            else:
                render_design_terminal(report, console=console)
            return

        resolved = _resolve_level(level, query, default=config.advisory.level)
        analysis = analyze_idioms(code, display_name, resolved, max_chars=config.max_buffer_chars)
    except ScanResourceError as exc:
        err_console.print(str(exc))
        raise typer.Exit(code=2) from exc

    if fmt == "json":
        typer.echo(render_idioms_json(analysis))
    else:
        render_idioms_terminal(analysis, console=console)


def _resolve_level(level: str | None, query: str | None, *, default: LevelFilter) -> LevelFilter:
    if level is not None:
        normalized = level.strip().lower()
        if normalized not in LEVEL_FILTERS:
            raise typer.BadParameter(f"Unsupported level: {level!r}. Use: {', '.join(LEVEL_FILTERS)}.")
        return cast(LevelFilter, normalized)
    if query:
        inferred = infer_level_from_query(query)
        if inferred is not None:
            logger.debug("Query %r maps to level %s.", query, inferred)
            return inferred
    return default


@app.command()
def rules(
    project: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Project directory (default: current directory).",
        ),
    ] = Path("."),
    category: Annotated[
        str | None,
        typer.Option("--category", "-c", help="Only list rules of this category.", show_default=False),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
) -> None:
    """
    List rule definitions (built-in + configured rule files) with counts.
    """

    fmt = _normalize_format(output_format)
    categories = _normalize_categories([category] if category else None)
    config, root = _load_project(project)
    compiler = _build_compiler(config, root)

    definitions = [d for d in compiler.definitions if categories is None or d.category in categories]
    stats = rule_stats(definitions)
    if fmt == "json":
        typer.echo(render_rules_json(definitions, stats))
        return
    render_rules_table(definitions, stats, console=console)


@app.command()
def validate(
    project: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Project directory (default: current directory).",
        ),
    ] = Path("."),
) -> None:
    """
    Check that every built-in and configured rule compiles. Exits 2 on errors.
    """

    config, root = _load_project(project)
    compiler = _build_compiler(config, root)
    errors = compiler.validate()
    if errors:
        _print_rule_errors(errors)
        raise typer.Exit(code=2)
    console.print(f"All {len(compiler.definitions)} rule(s) are valid.")
