from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

from codesentinel.advisory.types import LEVEL_FILTERS, LevelFilter
from codesentinel.engine.scan import DEFAULT_MAX_BUFFER_CHARS
from codesentinel.engine.types import CATEGORIES, SEVERITIES, Category, Severity


class ConfigError(ValueError):
    """Raised when a CodeSentinel configuration file is invalid."""


RuleId = str

_RULE_ID_RE = re.compile(r"^[A-Z][A-Z0-9]*(?:-[A-Z0-9]+)*$")

DEFAULT_FAIL_UNDER = 0


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value)


def _normalize_rule_id(value: str) -> str:
    # Rule IDs are case-insensitive in UX, but canonicalized internally.
    return value.strip().upper()


def _validate_rule_id(value: str, *, field_name: str) -> RuleId:
    normalized = _normalize_rule_id(value)
    if not _RULE_ID_RE.match(normalized):
        raise ConfigError(f"`{field_name}` is invalid; expected a rule id like CS-SEC001.")
    return normalized


def _validate_severity(value: Any, *, field_name: str) -> Severity:
    if not isinstance(value, str):
        raise ConfigError(f"`{field_name}` must be a string.")
    normalized = value.strip().lower()
    if normalized not in SEVERITIES:
        raise ConfigError(f"`{field_name}` must be one of: {', '.join(SEVERITIES)}.")
    return cast(Severity, normalized)


def _get(table: Mapping[str, Any], key: str, default: Any = None) -> Any:
    # Accept both `fail-under` and `fail_under`.
    return table.get(key, table.get(key.replace("-", "_"), default))


@dataclass(frozen=True, slots=True)
class RulesConfig:
    disable: tuple[RuleId, ...] = ()
    files: tuple[str, ...] = ()
    severity_overrides: Mapping[RuleId, Severity] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class AdvisoryConfig:
    level: LevelFilter = "all"


@dataclass(frozen=True, slots=True)
class CodeSentinelConfig:
    categories: tuple[Category, ...] = CATEGORIES
    max_buffer_chars: int | None = DEFAULT_MAX_BUFFER_CHARS
    fail_under: int = DEFAULT_FAIL_UNDER
    rules: RulesConfig = field(default_factory=RulesConfig)
    advisory: AdvisoryConfig = field(default_factory=AdvisoryConfig)


def find_project_root(start: Path | str) -> Path:
    """
    Closest directory at or above `start` that contains a `pyproject.toml`.

    Falls back to `start` itself (or its parent, for files).
    """

    start_path = Path(start).resolve()
    base = start_path if start_path.is_dir() else start_path.parent
    for candidate in (base, *base.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return base


def load_config(project_dir: Path | str = ".") -> CodeSentinelConfig:
    """
    Load CodeSentinel configuration from `pyproject.toml` within `project_dir`.

    If no file / no `[tool.codesentinel]` table exists, returns defaults.
    """

    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return CodeSentinelConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return CodeSentinelConfig()

    table = tool_table.get("codesentinel", {})
    if not isinstance(table, dict):
        raise ConfigError("`tool.codesentinel` must be a table.")
    if not table:
        return CodeSentinelConfig()

    return parse_config_table(table)


def parse_config_table(table: Mapping[str, Any]) -> CodeSentinelConfig:
    categories = _parse_categories(_get(table, "categories"))

    max_buffer_chars = _get(table, "max-buffer-chars", DEFAULT_MAX_BUFFER_CHARS)
    if isinstance(max_buffer_chars, bool) or not isinstance(max_buffer_chars, int):
        raise ConfigError("`tool.codesentinel.max-buffer-chars` must be an integer.")
    if max_buffer_chars < 0:
        raise ConfigError("`tool.codesentinel.max-buffer-chars` must be >= 0 (0 disables the limit).")

    fail_under = _get(table, "fail-under", DEFAULT_FAIL_UNDER)
    if isinstance(fail_under, bool) or not isinstance(fail_under, int):
        raise ConfigError("`tool.codesentinel.fail-under` must be an integer.")
    if not (0 <= fail_under <= 100):
        raise ConfigError("`tool.codesentinel.fail-under` must be between 0 and 100.")

    return CodeSentinelConfig(
        categories=categories,
        max_buffer_chars=max_buffer_chars or None,
        fail_under=fail_under,
        rules=_parse_rules_config(table.get("rules", {})),
        advisory=_parse_advisory_config(table.get("advisory", {})),
    )


def _parse_categories(value: Any) -> tuple[Category, ...]:
    if value is None:
        return CATEGORIES
    raw = _validate_str_list(value, field_name="tool.codesentinel.categories")
    out: list[Category] = []
    for item in raw:
        normalized = item.lower()
        if normalized not in CATEGORIES:
            raise ConfigError(f"`tool.codesentinel.categories` must only contain: {', '.join(CATEGORIES)}.")
        if normalized not in out:
            out.append(cast(Category, normalized))
    # Scan order stays fixed regardless of how the list is written.
    return tuple(c for c in CATEGORIES if c in out)


def _parse_rules_config(value: Any) -> RulesConfig:
    if value is None:
        return RulesConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.codesentinel.rules` must be a table.")

    disable = tuple(
        _validate_rule_id(raw, field_name=f"tool.codesentinel.rules.disable.{raw}")
        for raw in _validate_str_list(value.get("disable", []), field_name="tool.codesentinel.rules.disable")
    )
    files = _validate_str_list(value.get("files", []), field_name="tool.codesentinel.rules.files")

    sev_overrides_raw = _get(value, "severity-overrides")
    severity_overrides: dict[RuleId, Severity] = {}
    if sev_overrides_raw is not None:
        if not isinstance(sev_overrides_raw, dict):
            raise ConfigError("`tool.codesentinel.rules.severity-overrides` must be a table.")
        for raw_rule_id, raw_severity in sev_overrides_raw.items():
            field_name = f"tool.codesentinel.rules.severity-overrides.{raw_rule_id}"
            rule_id = _validate_rule_id(str(raw_rule_id), field_name=field_name)
            severity_overrides[rule_id] = _validate_severity(raw_severity, field_name=field_name)

    return RulesConfig(
        disable=disable,
        files=files,
        severity_overrides=MappingProxyType(severity_overrides),
    )


def _parse_advisory_config(value: Any) -> AdvisoryConfig:
    if value is None:
        return AdvisoryConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.codesentinel.advisory` must be a table.")
    level = value.get("level", "all")
    if not isinstance(level, str) or level.strip().lower() not in LEVEL_FILTERS:
        raise ConfigError(f"`tool.codesentinel.advisory.level` must be one of: {', '.join(LEVEL_FILTERS)}.")
    return AdvisoryConfig(level=cast(LevelFilter, level.strip().lower()))
